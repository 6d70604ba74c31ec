"""Exceptions for repoguard."""

from __future__ import annotations

from collections.abc import Sequence
from http import HTTPStatus
from typing import ClassVar

__all__ = [
    "AuthenticationError",
    "BadRequestError",
    "ConfigurationProviderError",
    "DuplicateDomainError",
    "InternalError",
    "NotFoundError",
    "SharedSettingsUpdateError",
    "UnauthorizedError",
]


class AuthenticationError(Exception):
    """Authentication of a request failed.

    Authenticators only ever raise subclasses of this exception. Faults of
    the underlying identity backend are translated into one of these at the
    point where the backend is called, with the original exception chained
    as the cause.
    """

    error: ClassVar[str] = "unauthorized"
    """Short error code for this exception."""

    status_code: ClassVar[int] = HTTPStatus.UNAUTHORIZED
    """The HTTP status code the transport layer should answer with."""


class UnauthorizedError(AuthenticationError):
    """The credentials were missing, malformed, or rejected."""


class BadRequestError(AuthenticationError):
    """The request or the directory results were ambiguous or malformed."""

    error = "bad_request"
    status_code = HTTPStatus.BAD_REQUEST


class NotFoundError(AuthenticationError):
    """No matching identity was found."""

    error = "not_found"
    status_code = HTTPStatus.NOT_FOUND


class InternalError(AuthenticationError):
    """The identity backend failed unexpectedly."""

    error = "internal_error"
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class ConfigurationProviderError(Exception):
    """The shared configuration document could not be read or written."""


class DuplicateDomainError(ValueError):
    """A settings domain was registered twice under the same name.

    This is a programming error in the list of registered domains and should
    abort startup.
    """

    def __init__(self, name: str) -> None:
        msg = f"Settings domain {name} is already registered"
        super().__init__(msg)
        self.name = name


class SharedSettingsUpdateError(Exception):
    """One or more settings domains could not be updated from a document.

    Parameters
    ----------
    errors
        Pairs of the domain name and the exception raised while updating
        that domain.
    """

    def __init__(self, errors: Sequence[tuple[str, Exception]]) -> None:
        self.errors = list(errors)
        lines = "\n".join(f"{n}: {e!s}" for n, e in self.errors)
        msg = (
            "Cannot load shared configuration"
            f" ({len(self.errors)} errors):\n{lines}"
        )
        super().__init__(msg)
