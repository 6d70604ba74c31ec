"""Tests for storage of the shared configuration document."""

from __future__ import annotations

from pathlib import Path

import pytest
from structlog.stdlib import BoundLogger

from repoguard.configuration.providers import FileConfigurationProvider
from repoguard.exceptions import ConfigurationProviderError


def test_file_provider(tmp_path: Path, logger: BoundLogger) -> None:
    path = tmp_path / "shared" / "config.json"
    provider = FileConfigurationProvider(path, logger)
    assert provider.name() == f"local file {path}"
    assert provider.is_mutable()
    assert provider.is_update_required()
    assert provider.fetch_configuration() == "{}"

    provider.update_configuration('{"ldap": {}}')
    assert path.read_text() == '{"ldap": {}}'
    assert not provider.is_update_required()
    assert provider.fetch_configuration() == '{"ldap": {}}'
    assert list(path.parent.iterdir()) == [path]


def test_read_only(tmp_path: Path, logger: BoundLogger) -> None:
    path = tmp_path / "config.json"
    path.write_text("{}")
    provider = FileConfigurationProvider(path, logger, mutable=False)

    assert not provider.is_mutable()
    with pytest.raises(ConfigurationProviderError, match="read-only"):
        provider.update_configuration('{"ldap": {}}')
    assert path.read_text() == "{}"


def test_unreadable(tmp_path: Path, logger: BoundLogger) -> None:
    provider = FileConfigurationProvider(tmp_path, logger)
    with pytest.raises(ConfigurationProviderError):
        provider.fetch_configuration()
    with pytest.raises(ConfigurationProviderError):
        provider.update_configuration("{}")
