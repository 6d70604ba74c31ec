"""Create repoguard components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

import structlog
from structlog.stdlib import BoundLogger

from .authenticators.base import Authenticator
from .authenticators.basic import BasicAuthenticator
from .authenticators.ldap import LdapAuthenticator, watch_ldap_settings
from .config import Config
from .configuration.domains import SharedSettingsProvider
from .configuration.providers import (
    ConfigurationProvider,
    FileConfigurationProvider,
)
from .configuration.schemas import SchemaLoader
from .configuration.shared import SharedConfigurationService
from .models.settings import LdapSettings
from .services.authentication import AuthenticationService
from .services.failure import FailureService
from .services.token import AccessTokenService
from .storage.ldap import LdapDirectoryClient

__all__ = ["Factory", "ProcessContext"]


@dataclass(frozen=True, slots=True)
class ProcessContext:
    """Per-process application context.

    Holds the singletons shared by every request. The shared configuration
    has been fully registered and loaded by the time this object exists, so
    it is safe to hand to concurrent consumers.
    """

    config: Config
    """repoguard's configuration."""

    failure_service: FailureService
    """Shared failure tracking."""

    shared_configuration: SharedConfigurationService
    """Shared configuration with the live settings of every domain."""

    @classmethod
    def from_config(
        cls,
        config: Config,
        configuration_provider: ConfigurationProvider | None = None,
    ) -> Self:
        """Create a new process context from the repoguard configuration.

        Parameters
        ----------
        config
            The repoguard configuration.
        configuration_provider
            Storage of the shared configuration. If not given, the file
            named in the configuration is used.

        Returns
        -------
        ProcessContext
            Shared context for a repoguard process.

        Raises
        ------
        ConfigurationProviderError
            Raised if the shared configuration could not be read or seeded.
        SharedSettingsUpdateError
            Raised if the stored shared configuration is invalid.
        """
        logger = structlog.get_logger("repoguard")
        failure_service = FailureService(logger)
        if not configuration_provider:
            configuration_provider = FileConfigurationProvider(
                config.shared_configuration_path,
                logger,
                mutable=config.shared_configuration_mutable,
            )
        shared_configuration = SharedConfigurationService(
            settings_provider=SharedSettingsProvider(),
            configuration_provider=configuration_provider,
            known_schemas=SchemaLoader().load_generated_schemas(),
            failure_service=failure_service,
            logger=logger,
        )
        shared_configuration.load_from_provider()
        watch_ldap_settings(
            shared_configuration.get_domain_settings(LdapSettings), logger
        )
        return cls(
            config=config,
            failure_service=failure_service,
            shared_configuration=shared_configuration,
        )


class Factory:
    """Build repoguard components.

    Parameters
    ----------
    context
        Shared process context.
    token_service
        Access token service used by the authenticators.
    logger
        Logger to use for created components.
    """

    def __init__(
        self,
        context: ProcessContext,
        token_service: AccessTokenService,
        logger: BoundLogger | None = None,
    ) -> None:
        self._context = context
        self._token_service = token_service
        self._logger = logger or structlog.get_logger("repoguard")

    def create_authentication_service(self) -> AuthenticationService:
        """Create the chain of authenticators.

        Returns
        -------
        AuthenticationService
            Chain trying Basic authentication first and then LDAP.
        """
        authenticators: list[Authenticator] = [
            self.create_basic_authenticator(),
            self.create_ldap_authenticator(),
        ]
        return AuthenticationService(authenticators, self._logger)

    def create_basic_authenticator(self) -> BasicAuthenticator:
        """Create an authenticator using access token secrets."""
        return BasicAuthenticator(self._token_service)

    def create_ldap_authenticator(self) -> LdapAuthenticator:
        """Create an authenticator following the live LDAP settings."""
        settings = self._context.shared_configuration.get_domain_settings(
            LdapSettings
        )
        directory = LdapDirectoryClient(
            settings, self._context.failure_service, self._logger
        )
        return LdapAuthenticator(
            settings=settings,
            directory=directory,
            token_service=self._token_service,
            logger=self._logger,
        )
