"""Representation of authentication-related data."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["AuthChallenge"]


@dataclass
class AuthChallenge:
    """Represents a ``WWW-Authenticate`` header for a simple challenge."""

    auth_type: str
    """The authentication type (the first part of the header)."""

    realm: str
    """The value of the realm attribute."""

    def to_header(self) -> str:
        """Construct the WWW-Authenticate header for this challenge.

        Returns
        -------
        str
            Contents of the WWW-Authenticate header.
        """
        return f'{self.auth_type} realm="{self.realm}"'
