"""LDAP directory access for repoguard."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import bonsai
from bonsai import LDAPClient, LDAPConnection, LDAPSearchScope
from structlog.stdlib import BoundLogger

from ..constants import LDAP_FILTER_ERROR, LDAP_TIMEOUT
from ..exceptions import (
    BadRequestError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from ..models.ldap import SearchEntry
from ..models.settings import LdapSettings
from ..reactive import MutableReference
from ..services.failure import FailureService

__all__ = ["LdapDirectoryClient"]


class LdapDirectoryClient:
    """Bind to and search an LDAP directory.

    Every operation takes the LDAP settings to use explicitly so that callers
    can run several operations against one consistent snapshot. The public
    `search` method reads the live settings itself.

    All bonsai exceptions are translated into
    `~repoguard.exceptions.AuthenticationError` subclasses here, with the
    original exception chained as the cause.

    Parameters
    ----------
    settings
        Live LDAP settings.
    failure_service
        Where to report unexpected directory failures.
    logger
        Logger for debug messages and errors.
    """

    def __init__(
        self,
        settings: MutableReference[LdapSettings],
        failure_service: FailureService,
        logger: BoundLogger,
    ) -> None:
        self._settings = settings
        self._failures = failure_service
        self._logger = logger

    @asynccontextmanager
    async def bind(
        self, settings: LdapSettings, user: str, password: str
    ) -> AsyncIterator[LDAPConnection]:
        """Open a connection bound with a simple bind.

        Parameters
        ----------
        settings
            LDAP settings naming the server.
        user
            DN to bind as.
        password
            Password for the bind.

        Yields
        ------
        bonsai.LDAPConnection
            The bound connection, closed on exit.

        Raises
        ------
        UnauthorizedError
            Raised if the connection or bind failed for any reason.
        """
        logger = self._logger.bind(ldap_url=settings.url, ldap_user=user)
        client = LDAPClient(settings.url)
        client.set_credentials("SIMPLE", user=user, password=password)
        try:
            conn = await client.connect(is_async=True, timeout=LDAP_TIMEOUT)
        except Exception as e:
            logger.debug("Cannot bind to LDAP", error=str(e))
            raise UnauthorizedError("Unauthorized LDAP access") from e
        try:
            yield conn
        finally:
            conn.close()

    async def search_with(
        self,
        conn: LDAPConnection,
        settings: LdapSettings,
        filter_exp: str,
        *attributes: str,
    ) -> list[SearchEntry]:
        """Run a subtree search below the configured base DN.

        Parameters
        ----------
        conn
            Bound connection to search with.
        settings
            LDAP settings providing the base DN.
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
        NotFoundError
            Raised if nothing matched or the base DN does not exist.
        BadRequestError
            Raised if the search filter is malformed.
        InternalError
            Raised on any other failure of the search.
        """
        logger = self._logger.bind(
            ldap_attrs=list(attributes),
            ldap_base=settings.base_dn,
            ldap_search=filter_exp,
        )
        try:
            logger.debug("Querying LDAP")
            results = await conn.search(
                base=settings.base_dn,
                scope=LDAPSearchScope.SUB,
                filter_exp=filter_exp,
                attrlist=list(attributes),
                timeout=LDAP_TIMEOUT,
            )
            entries = [
                SearchEntry(
                    dn=str(result.dn),
                    attributes={
                        a: [str(v) for v in result.get(a, [])]
                        for a in attributes
                    },
                )
                for result in results
            ]
        except bonsai.NoSuchObjectError as e:
            logger.debug("LDAP base not found", error=str(e))
            raise NotFoundError(str(e)) from e
        except bonsai.LDAPError as e:
            if e.code == LDAP_FILTER_ERROR:
                self._failures.report_failure("Bad search request in LDAP", e)
                raise BadRequestError(str(e)) from e
            self._failures.report_failure("Unknown LDAP search exception", e)
            raise InternalError(str(e)) from e
        except Exception as e:
            self._failures.report_failure("Unknown LDAP search exception", e)
            raise InternalError(str(e)) from e

        logger.debug("LDAP entries found", ldap_results=len(entries))
        if not entries:
            raise NotFoundError("Entries not found")
        return entries

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
            Raised if the bind or the search failed, as described in
            `bind` and `search_with`.
        """
        settings = self._settings.get()
        user = settings.search_user_dn
        async with self.bind(
            settings, user, settings.search_user_password
        ) as conn:
            return await self.search_with(
                conn, settings, filter_exp, *attributes
            )
