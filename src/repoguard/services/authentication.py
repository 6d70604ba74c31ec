"""The chain of authenticators."""

from __future__ import annotations

from collections.abc import Iterable

from structlog.stdlib import BoundLogger

from ..authenticators.base import Authenticator
from ..credentials import extract_from_header
from ..exceptions import AuthenticationError, UnauthorizedError
from ..models.auth import AuthChallenge
from ..models.credentials import Credentials
from ..models.token import AccessToken

__all__ = ["AuthenticationService"]


class AuthenticationService:
    """Try an ordered list of authenticators until one accepts.

    Parameters
    ----------
    authenticators
        Authenticators in the order they should be tried.
    logger
        Logger to use.
    """

    def __init__(
        self, authenticators: Iterable[Authenticator], logger: BoundLogger
    ) -> None:
        self._authenticators = list(authenticators)
        self._logger = logger

    async def authenticate(self, credentials: Credentials) -> AccessToken:
        """Authenticate credentials with the first accepting authenticator.

        Authenticators that are not enabled are skipped. Failures of
        individual authenticators are logged at debug level only.

        Parameters
        ----------
        credentials
            Name and secret presented by the client.

        Returns
        -------
        AccessToken
            Access token returned by the first authenticator that accepted.

        Raises
        ------
        UnauthorizedError
            Raised if no enabled authenticator accepted the credentials.
        """
        logger = self._logger.bind(user=credentials.name)
        for authenticator in self._authenticators:
            if not authenticator.enabled():
                continue
            try:
                token = await authenticator.authenticate(credentials)
            except AuthenticationError as e:
                logger.debug(
                    "Authentication failed",
                    realm=authenticator.realm(),
                    error=str(e),
                    error_type=e.error,
                )
                continue
            logger.debug("Authenticated", realm=authenticator.realm())
            return token
        raise UnauthorizedError("Invalid authorization credentials")

    async def authenticate_by_header(self, header: str | None) -> AccessToken:
        """Authenticate the credentials in an ``Authorization`` header.

        Parameters
        ----------
        header
            Value of the ``Authorization`` header, if present.

        Returns
        -------
        AccessToken
            Access token of the authenticated identity.

        Raises
        ------
        UnauthorizedError
            Raised if the header could not be parsed or no authenticator
            accepted its credentials.
        """
        return await self.authenticate(extract_from_header(header))

    def generate_challenges(self) -> list[str]:
        """Build ``WWW-Authenticate`` values for the enabled realms."""
        return [
            AuthChallenge(auth_type="Basic", realm=a.realm()).to_header()
            for a in self._authenticators
            if a.enabled()
        ]
