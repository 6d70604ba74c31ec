"""Tests for building repoguard components."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from repoguard.config import Config
from repoguard.factory import Factory, ProcessContext
from repoguard.models.credentials import Credentials
from repoguard.models.settings import FrontendSettings, LdapSettings

from .support.config import MockConfigurationProvider
from .support.constants import TEST_LDAP_SETTINGS
from .support.ldap import MockLDAP
from .support.logging import parse_log
from .support.tokens import MockAccessTokenService


def test_seed_shared_configuration(tmp_path: Path) -> None:
    path = tmp_path / "shared.json"
    config = Config(shared_configuration_path=path)

    context = ProcessContext.from_config(config)

    assert context.config == config
    document = json.loads(path.read_text())
    assert document["ldap"]["hostname"] == LdapSettings().hostname
    shared = context.shared_configuration
    assert shared.get_provider_name() == f"local file {path}"
    assert not shared.is_update_required()


def test_read_only_shared_configuration(tmp_path: Path) -> None:
    path = tmp_path / "shared.json"
    config = Config(
        shared_configuration_path=path, shared_configuration_mutable=False
    )

    context = ProcessContext.from_config(config)

    assert not path.exists()
    assert not context.shared_configuration.is_mutable()


@pytest.mark.asyncio
async def test_authentication_service(
    mock_ldap: MockLDAP, token_service: MockAccessTokenService
) -> None:
    document = {
        "ldap": TEST_LDAP_SETTINGS.model_dump(mode="json", by_alias=True),
        "frontend": {"title": "Releases"},
    }
    provider = MockConfigurationProvider(json.dumps(document))
    context = ProcessContext.from_config(Config(), provider)
    shared = context.shared_configuration
    frontend = shared.get_domain_settings(FrontendSettings).get()
    assert frontend.title == "Releases"

    mock_ldap.bases.add(TEST_LDAP_SETTINGS.base_dn)
    mock_ldap.add_account(
        TEST_LDAP_SETTINGS.search_user_dn,
        TEST_LDAP_SETTINGS.search_user_password,
    )
    attributes = {
        "uid": ["alice"],
        "memberOf": ["cn=maven,ou=groups,dc=example,dc=com"],
    }
    mock_ldap.add_person(
        "uid=alice,ou=people,dc=example,dc=com", "alice-password", attributes
    )
    factory = Factory(context, token_service)
    authentication_service = factory.create_authentication_service()

    assert authentication_service.generate_challenges() == [
        'Basic realm="Basic"',
        'Basic realm="LDAP"',
    ]
    token = await authentication_service.authenticate(
        Credentials("alice", "alice-password")
    )
    assert token.name == "alice"

    shared.update_domain("ldap", {"enabled": False})
    assert authentication_service.generate_challenges() == [
        'Basic realm="Basic"'
    ]


def test_ldap_settings_logged_once(
    token_service: MockAccessTokenService, caplog: pytest.LogCaptureFixture
) -> None:
    context = ProcessContext.from_config(
        Config(), MockConfigurationProvider()
    )
    factory = Factory(context, token_service)
    factory.create_authentication_service()
    factory.create_authentication_service()

    caplog.clear()
    context.shared_configuration.update_domain("ldap", TEST_LDAP_SETTINGS)

    messages = [
        m for m in parse_log(caplog) if m["event"] == "LDAP settings changed"
    ]
    assert messages == [
        {
            "enabled": True,
            "event": "LDAP settings changed",
            "ldap_url": "ldap://ldap.example.com:389",
            "severity": "info",
        }
    ]
