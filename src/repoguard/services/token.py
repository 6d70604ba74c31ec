"""Interface to the access token service."""

from __future__ import annotations

from abc import ABCMeta, abstractmethod

from ..models.token import (
    AccessToken,
    CreateAccessTokenRequest,
    CreateAccessTokenResponse,
)

__all__ = ["AccessTokenService"]


class AccessTokenService(metaclass=ABCMeta):
    """Lookup and creation of access tokens.

    Tokens are owned and stored by the token subsystem. Authenticators only
    look them up, check secrets, and request creation of tokens for newly
    seen directory users.
    """

    @abstractmethod
    async def get_access_token(self, name: str) -> AccessToken | None:
        """Look up an access token by name.

        Parameters
        ----------
        name
            Name of the token.

        Returns
        -------
        AccessToken or None
            The token, or `None` if no token with that name exists.
        """

    @abstractmethod
    async def create_access_token(
        self, request: CreateAccessTokenRequest
    ) -> CreateAccessTokenResponse:
        """Create a new access token.

        Parameters
        ----------
        request
            Type, name, and optional secret of the new token.

        Returns
        -------
        CreateAccessTokenResponse
            The created token and its secret.
        """

    @abstractmethod
    async def secret_matches(self, identifier: int, secret: str) -> bool:
        """Check a secret against the stored secret of a token.

        Parameters
        ----------
        identifier
            Identifier of the token.
        secret
            Secret presented by the client.

        Returns
        -------
        bool
            Whether the secret is correct.
        """
