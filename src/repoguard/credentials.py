"""Parsing of credentials from ``Authorization`` headers."""

from __future__ import annotations

import base64
import binascii

from .constants import BASIC_AUTH_METHODS
from .exceptions import UnauthorizedError
from .models.credentials import Credentials

__all__ = [
    "extract_from_base64",
    "extract_from_header",
    "extract_from_string",
]


def extract_from_header(header: str | None) -> Credentials:
    """Extract Basic credentials from an ``Authorization`` header.

    Parameters
    ----------
    header
        Value of the ``Authorization`` header, or `None` if it was absent.

    Returns
    -------
    Credentials
        The name and secret from the header.

    Raises
    ------
    UnauthorizedError
        Raised if the header is missing, uses an authentication method other
        than ``Basic`` or ``xBasic``, or does not hold valid credentials.
    """
    if header is None:
        raise UnauthorizedError("Missing authorization credentials")
    for method in BASIC_AUTH_METHODS:
        if header.startswith(method):
            return extract_from_base64(header[len(method) :].strip())
    raise UnauthorizedError("Unknown authorization method")


def extract_from_base64(encoded: str) -> Credentials:
    """Extract credentials from the base64 payload of a Basic header.

    Parameters
    ----------
    encoded
        Base64 encoding of ``name:secret``.

    Returns
    -------
    Credentials
        The decoded credentials.

    Raises
    ------
    UnauthorizedError
        Raised if the payload is not valid base64 text or is not of the form
        ``name:secret``.
    """
    try:
        decoded = base64.b64decode(encoded, validate=True).decode()
    except (binascii.Error, UnicodeDecodeError) as e:
        msg = "Invalid authorization credentials format"
        raise UnauthorizedError(msg) from e
    return extract_from_string(decoded)


def extract_from_string(credentials: str) -> Credentials:
    """Split ``name:secret`` into credentials.

    Only the first colon separates the parts, so the secret may itself
    contain colons.
    """
    parts = credentials.split(":", 1)
    if len(parts) != 2:
        raise UnauthorizedError("Invalid authorization credentials format")
    return Credentials(name=parts[0], secret=parts[1])
