"""Credentials presented by a client."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["Credentials"]


@dataclass(frozen=True, slots=True)
class Credentials:
    """A name and secret pair extracted from one request.

    Credentials live only for the duration of a single authentication attempt
    and are never persisted.
    """

    name: str
    """Name of the identity the client claims to be."""

    secret: str = field(repr=False)
    """Secret proving that identity, hidden from ``repr`` to keep it out of
    logs."""
