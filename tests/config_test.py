"""Test configuration parsing."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError
from safir.logging import LogLevel, Profile

from repoguard.config import Config
from repoguard.constants import SHARED_CONFIGURATION_PATH

from .support.config import config_path


def test_defaults() -> None:
    config = Config.from_file(config_path("minimal.yaml"))
    assert config.log_level == LogLevel.INFO
    assert config.log_profile == Profile.production
    assert config.shared_configuration_path == Path(SHARED_CONFIGURATION_PATH)
    assert config.shared_configuration_mutable


def test_shared_file() -> None:
    config = Config.from_file(config_path("shared-file.yaml"))
    assert config.log_level == LogLevel.DEBUG
    assert config.log_profile == Profile.development
    assert config.shared_configuration_path == Path(
        "/var/lib/repoguard/shared.json"
    )
    assert not config.shared_configuration_mutable


def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REPOGUARD_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("REPOGUARD_SHARED_CONFIGURATION_PATH", "/tmp/s.json")
    monkeypatch.setenv("REPOGUARD_SHARED_CONFIGURATION_MUTABLE", "true")

    config = Config.from_file(config_path("shared-file.yaml"))
    assert config.log_level == LogLevel.WARNING
    assert config.log_profile == Profile.development
    assert config.shared_configuration_path == Path("/tmp/s.json")
    assert config.shared_configuration_mutable


def test_unknown_key() -> None:
    with pytest.raises(ValidationError):
        Config.from_file(config_path("bad-key.yaml"))
