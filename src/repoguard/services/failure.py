"""Tracking of unexpected failures for diagnostics."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime

from safir.datetime import current_datetime
from structlog.stdlib import BoundLogger

from ..constants import FAILURE_HISTORY_SIZE

__all__ = ["Failure", "FailureService"]


@dataclass(frozen=True, slots=True)
class Failure:
    """A recorded failure."""

    context: str
    """Short description of what was being done when the failure happened."""

    message: str
    """String form of the exception."""

    exception_type: str
    """Fully-qualified name of the exception class."""

    timestamp: datetime
    """When the failure was reported."""


class FailureService:
    """Collect failures that operators should know about.

    Reporting is fire-and-forget. The failure is logged with its traceback
    and kept in a bounded in-memory history that status pages can display.

    Parameters
    ----------
    logger
        Logger to use.
    max_failures
        Maximum number of failures to remember. Older ones are dropped.
    """

    def __init__(
        self, logger: BoundLogger, max_failures: int = FAILURE_HISTORY_SIZE
    ) -> None:
        self._logger = logger
        self._failures: deque[Failure] = deque(maxlen=max_failures)
        self._lock = threading.Lock()

    def report_failure(self, context: str, error: BaseException) -> None:
        """Record a failure.

        Parameters
        ----------
        context
            What was being done when the failure happened.
        error
            The exception that was raised.
        """
        cls = type(error)
        failure = Failure(
            context=context,
            message=str(error),
            exception_type=f"{cls.__module__}.{cls.__qualname__}",
            timestamp=current_datetime(),
        )
        with self._lock:
            self._failures.append(failure)
        self._logger.error(context, error=str(error), exc_info=error)

    def get_failures(self) -> list[Failure]:
        """Return the recorded failures, oldest first."""
        with self._lock:
            return list(self._failures)

    def has_failures(self) -> bool:
        """Whether any failure has been recorded since the last clear."""
        with self._lock:
            return bool(self._failures)

    def clear_failures(self) -> None:
        """Forget all recorded failures."""
        with self._lock:
            self._failures.clear()
