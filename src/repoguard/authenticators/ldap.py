"""Authentication against an LDAP directory."""

from __future__ import annotations

from typing import override

from bonsai.utils import escape_filter_exp
from structlog.stdlib import BoundLogger

from ..constants import LDAP_PERSON_FILTER
from ..exceptions import BadRequestError, UnauthorizedError
from ..models.credentials import Credentials
from ..models.ldap import SearchEntry
from ..models.settings import LdapSettings
from ..models.token import AccessToken, CreateAccessTokenRequest
from ..reactive import MutableReference
from ..services.token import AccessTokenService
from ..storage.ldap import LdapDirectoryClient
from .base import Authenticator

__all__ = ["LdapAuthenticator", "watch_ldap_settings"]


class LdapAuthenticator(Authenticator):
    """Authenticate users by binding to an LDAP directory as them.

    An empty secret is rejected before contacting the directory. Otherwise
    authentication proceeds in stages, and the first failing stage ends the
    attempt with its error:

    #. Bind as the configured search user.
    #. Find the single person entry whose user attribute equals the
       requested name.
    #. Bind as that entry with the supplied secret, which is the actual
       password check, and repeat the search with the configured user filter
       appended. Again exactly one entry must match.
    #. Require that entry to have exactly one value of the user attribute
       and that the value equal the requested name exactly.
    #. Return the access token with that name, creating it if needed.

    The live settings are read once at the start of each attempt, so one
    attempt always uses a single version of the settings while the next
    attempt sees any update made in between.

    Parameters
    ----------
    settings
        Live LDAP settings.
    directory
        Client for the LDAP directory.
    token_service
        Service used to find or create the access token of the user.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        settings: MutableReference[LdapSettings],
        directory: LdapDirectoryClient,
        token_service: AccessTokenService,
        logger: BoundLogger,
    ) -> None:
        self._settings = settings
        self._directory = directory
        self._token_service = token_service
        self._logger = logger

    @override
    async def authenticate(self, credentials: Credentials) -> AccessToken:
        # A simple bind with an empty password is an unauthenticated bind,
        # which many servers accept without checking anything.
        if not credentials.secret:
            raise UnauthorizedError("Unauthorized LDAP access")

        settings = self._settings.get()
        attribute = settings.user_attribute
        name_filter = f"({attribute}={escape_filter_exp(credentials.name)})"
        logger = self._logger.bind(
            user=credentials.name, ldap_url=settings.url
        )

        # Find the user entry with the search user.
        search_user = settings.search_user_dn
        search_password = settings.search_user_password
        async with self._directory.bind(
            settings, search_user, search_password
        ) as conn:
            results = await self._directory.search_with(
                conn,
                settings,
                f"(&{LDAP_PERSON_FILTER}{name_filter})",
                attribute,
            )
        if len(results) != 1:
            raise BadRequestError("Could not identify one specific result")

        # Binding as the matched entry checks the password. The user filter
        # from the settings is then applied with the user's own privileges.
        async with self._directory.bind(
            settings, results[0].dn, credentials.secret
        ) as conn:
            results = await self._directory.search_with(
                conn,
                settings,
                f"(&{LDAP_PERSON_FILTER}{name_filter}{settings.user_filter})",
                attribute,
            )
        if len(results) != 1:
            msg = "Could not identify one specific result as user"
            raise BadRequestError(msg)

        name = self._get_user_name(results[0], attribute)
        if name != credentials.name:
            msg = "LDAP user does not match required attribute"
            logger.warning(msg, ldap_name=name)
            raise UnauthorizedError(msg)

        token = await self._token_service.get_access_token(name)
        if token:
            return token
        request = CreateAccessTokenRequest(
            type=settings.user_type, name=name, secret=credentials.secret
        )
        response = await self._token_service.create_access_token(request)
        logger.info("Created access token for LDAP user")
        return response.access_token

    async def search(
        self, filter_exp: str, *attributes: str
    ) -> list[SearchEntry]:
        """Search the directory as the configured search user.

        Parameters
        ----------
        filter_exp
            Search filter.
        *attributes
            Attributes to retrieve.

        Returns
        -------
        list of SearchEntry
            Matching entries. Never empty.

        Raises
        ------
        AuthenticationError
            Raised if the bind or the search failed.
        """
        return await self._directory.search(filter_exp, *attributes)

    @override
    def enabled(self) -> bool:
        return self._settings.map(lambda s: s.enabled)

    @override
    def realm(self) -> str:
        return "LDAP"

    def _get_user_name(self, entry: SearchEntry, attribute: str) -> str:
        values = entry.attributes.get(attribute, [])
        if len(values) != 1:
            raise BadRequestError("Could not identify one specific attribute")
        return values[0]


def watch_ldap_settings(
    settings: MutableReference[LdapSettings], logger: BoundLogger
) -> None:
    """Log every change of the live LDAP settings.

    Call this once per process for the process-wide settings reference, not
    once per authenticator.

    Parameters
    ----------
    settings
        Live LDAP settings.
    logger
        Logger to use.
    """

    def log_change(new_settings: LdapSettings) -> None:
        logger.info(
            "LDAP settings changed",
            enabled=new_settings.enabled,
            ldap_url=new_settings.url,
        )

    settings.subscribe(log_change)
