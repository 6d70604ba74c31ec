"""Base class for authenticators."""

from __future__ import annotations

from abc import ABCMeta, abstractmethod

from ..models.credentials import Credentials
from ..models.token import AccessToken

__all__ = ["Authenticator"]


class Authenticator(metaclass=ABCMeta):
    """Abstract base class for identity backends.

    Authenticators are tried in order by
    `~repoguard.services.authentication.AuthenticationService`, which skips
    those that are not enabled. A disabled authenticator must still be safe
    to call.
    """

    @abstractmethod
    async def authenticate(self, credentials: Credentials) -> AccessToken:
        """Authenticate a client.

        Parameters
        ----------
        credentials
            Name and secret presented by the client.

        Returns
        -------
        AccessToken
            Access token of the authenticated identity.

        Raises
        ------
        AuthenticationError
            Raised if the credentials were not accepted.
        """

    @abstractmethod
    def enabled(self) -> bool:
        """Whether this authenticator should currently be tried."""

    @abstractmethod
    def realm(self) -> str:
        """Name of this backend, used in ``WWW-Authenticate`` challenges."""
