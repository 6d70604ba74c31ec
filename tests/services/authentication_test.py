"""Tests for the authenticator chain."""

from __future__ import annotations

import base64

import pytest
from structlog.stdlib import BoundLogger

from repoguard.authenticators.basic import BasicAuthenticator
from repoguard.authenticators.ldap import LdapAuthenticator
from repoguard.exceptions import UnauthorizedError
from repoguard.models.credentials import Credentials
from repoguard.models.settings import LdapSettings
from repoguard.reactive import MutableReference
from repoguard.services.authentication import AuthenticationService

from ..support.constants import TEST_LDAP_SETTINGS
from ..support.ldap import MockLDAP
from ..support.tokens import MockAccessTokenService


@pytest.fixture
def authentication_service(
    ldap_authenticator: LdapAuthenticator,
    mock_ldap: MockLDAP,
    token_service: MockAccessTokenService,
    logger: BoundLogger,
) -> AuthenticationService:
    attributes = {
        "uid": ["alice"],
        "memberOf": ["cn=maven,ou=groups,dc=example,dc=com"],
    }
    mock_ldap.add_person(
        "uid=alice,ou=people,dc=example,dc=com", "alice-password", attributes
    )
    token_service.add_token("deploy", "deploy-secret")
    basic = BasicAuthenticator(token_service)
    return AuthenticationService([basic, ldap_authenticator], logger)


@pytest.mark.asyncio
async def test_first_accepting_wins(
    authentication_service: AuthenticationService,
    mock_ldap: MockLDAP,
) -> None:
    token = await authentication_service.authenticate(
        Credentials("deploy", "deploy-secret")
    )
    assert token.name == "deploy"
    assert mock_ldap.binds == []

    token = await authentication_service.authenticate(
        Credentials("alice", "alice-password")
    )
    assert token.name == "alice"
    assert len(mock_ldap.binds) == 2


@pytest.mark.asyncio
async def test_all_rejected(
    authentication_service: AuthenticationService,
) -> None:
    with pytest.raises(UnauthorizedError, match="Invalid authorization"):
        await authentication_service.authenticate(
            Credentials("alice", "wrong")
        )


@pytest.mark.asyncio
async def test_disabled_skipped(
    authentication_service: AuthenticationService,
    ldap_settings: MutableReference[LdapSettings],
    mock_ldap: MockLDAP,
) -> None:
    disabled = TEST_LDAP_SETTINGS.model_copy(update={"enabled": False})
    ldap_settings.update(disabled)

    with pytest.raises(UnauthorizedError):
        await authentication_service.authenticate(
            Credentials("alice", "alice-password")
        )
    assert mock_ldap.binds == []
    assert authentication_service.generate_challenges() == [
        'Basic realm="Basic"'
    ]


@pytest.mark.asyncio
async def test_authenticate_by_header(
    authentication_service: AuthenticationService,
) -> None:
    encoded = base64.b64encode(b"alice:alice-password").decode()
    token = await authentication_service.authenticate_by_header(
        f"xBasic {encoded}"
    )
    assert token.name == "alice"

    with pytest.raises(UnauthorizedError, match="Missing"):
        await authentication_service.authenticate_by_header(None)


def test_challenges(authentication_service: AuthenticationService) -> None:
    assert authentication_service.generate_challenges() == [
        'Basic realm="Basic"',
        'Basic realm="LDAP"',
    ]
