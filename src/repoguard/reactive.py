"""Observable holders for live configuration values."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")

__all__ = ["MutableReference"]


class MutableReference(Generic[T]):
    """A shared, observable reference to the current version of a value.

    Readers always see a complete value, either the one before or the one
    after a concurrent update, since the reference is replaced as a whole.
    Values stored here are expected to be immutable, so a value returned by
    `get` is a consistent snapshot for as long as the caller holds it.

    Parameters
    ----------
    value
        Initial value.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._lock = threading.Lock()
        self._subscribers: list[Callable[[T], None]] = []

    def get(self) -> T:
        """Return the latest committed value without blocking."""
        return self._value

    def map(self, mapper: Callable[[T], R]) -> R:
        """Apply a function to the current value and return its result."""
        return mapper(self._value)

    def subscribe(self, subscriber: Callable[[T], None]) -> None:
        """Register a callback invoked with every newly committed value.

        Parameters
        ----------
        subscriber
            Callback that takes the new value.
        """
        with self._lock:
            self._subscribers.append(subscriber)

    def update(self, value: T) -> T:
        """Replace the value and notify subscribers.

        Subscribers are called outside the lock, in registration order.

        Parameters
        ----------
        value
            The new value.

        Returns
        -------
        object
            The new value, for chaining.
        """
        with self._lock:
            self._value = value
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            subscriber(value)
        return value
