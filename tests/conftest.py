"""Test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog
from safir.logging import LogLevel, Profile, configure_logging
from structlog.stdlib import BoundLogger

from repoguard.authenticators.ldap import LdapAuthenticator
from repoguard.configuration.domains import SharedSettingsProvider
from repoguard.configuration.schemas import SchemaLoader
from repoguard.configuration.shared import SharedConfigurationService
from repoguard.models.settings import LdapSettings
from repoguard.reactive import MutableReference
from repoguard.services.failure import FailureService
from repoguard.storage.ldap import LdapDirectoryClient

from .support.config import MockConfigurationProvider
from .support.constants import TEST_LDAP_SETTINGS
from .support.ldap import MockLDAP, patch_ldap
from .support.tokens import MockAccessTokenService


@pytest.fixture(autouse=True, scope="session")
def _configure_logging() -> None:
    configure_logging(
        name="repoguard", profile=Profile.production, log_level=LogLevel.DEBUG
    )


@pytest.fixture
def logger() -> BoundLogger:
    return structlog.get_logger("repoguard")


@pytest.fixture
def failure_service(logger: BoundLogger) -> FailureService:
    return FailureService(logger)


@pytest.fixture
def configuration_provider() -> MockConfigurationProvider:
    return MockConfigurationProvider()


@pytest.fixture
def shared_configuration(
    configuration_provider: MockConfigurationProvider,
    failure_service: FailureService,
    logger: BoundLogger,
) -> SharedConfigurationService:
    """Return a shared configuration with the default domains."""
    return SharedConfigurationService(
        settings_provider=SharedSettingsProvider(),
        configuration_provider=configuration_provider,
        known_schemas=SchemaLoader().load_generated_schemas(),
        failure_service=failure_service,
        logger=logger,
    )


@pytest.fixture
def ldap_settings(
    shared_configuration: SharedConfigurationService,
) -> MutableReference[LdapSettings]:
    """Return the live LDAP settings, enabled and pointing to test values."""
    reference = shared_configuration.get_domain_settings(LdapSettings)
    reference.update(TEST_LDAP_SETTINGS)
    return reference


@pytest.fixture
def mock_ldap() -> Iterator[MockLDAP]:
    """Return a mock LDAP server with the search user and base DN set up."""
    yield from patch_ldap()


@pytest.fixture
def token_service() -> MockAccessTokenService:
    return MockAccessTokenService()


@pytest.fixture
def ldap_authenticator(
    ldap_settings: MutableReference[LdapSettings],
    mock_ldap: MockLDAP,
    token_service: MockAccessTokenService,
    failure_service: FailureService,
    logger: BoundLogger,
) -> LdapAuthenticator:
    mock_ldap.bases.add(TEST_LDAP_SETTINGS.base_dn)
    mock_ldap.add_account(
        TEST_LDAP_SETTINGS.search_user_dn,
        TEST_LDAP_SETTINGS.search_user_password,
    )
    directory = LdapDirectoryClient(ldap_settings, failure_service, logger)
    return LdapAuthenticator(
        settings=ldap_settings,
        directory=directory,
        token_service=token_service,
        logger=logger,
    )
