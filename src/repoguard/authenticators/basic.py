"""Authentication against secrets held by the token service."""

from __future__ import annotations

from typing import override

from ..exceptions import UnauthorizedError
from ..models.credentials import Credentials
from ..models.token import AccessToken
from ..services.token import AccessTokenService
from .base import Authenticator

__all__ = ["BasicAuthenticator"]


class BasicAuthenticator(Authenticator):
    """Check credentials against the secret of the named access token.

    Parameters
    ----------
    token_service
        Service holding access tokens and their secrets.
    """

    def __init__(self, token_service: AccessTokenService) -> None:
        self._token_service = token_service

    @override
    async def authenticate(self, credentials: Credentials) -> AccessToken:
        token = await self._token_service.get_access_token(credentials.name)
        if token and await self._token_service.secret_matches(
            token.identifier, credentials.secret
        ):
            return token
        raise UnauthorizedError("Invalid authorization credentials")

    @override
    def enabled(self) -> bool:
        return True

    @override
    def realm(self) -> str:
        return "Basic"
