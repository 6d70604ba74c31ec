"""Configuration for repoguard.

This is the process configuration, read once at startup from a YAML file
with environment variable overrides. It only says where the shared
configuration lives and how to log. Everything that may change at runtime,
such as the LDAP settings, is part of the shared configuration instead (see
`repoguard.configuration.shared`).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self, override

import yaml
from pydantic import AliasChoices, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from safir.logging import LogLevel, Profile, configure_logging

from .constants import SHARED_CONFIGURATION_PATH

__all__ = ["CamelCaseSettings", "Config", "EnvFirstSettings"]


class CamelCaseSettings(BaseSettings):
    """Base class for Pydantic settings supporting camel-case.

    This base class also forbids all extra attributes.
    """

    model_config = SettingsConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )


class EnvFirstSettings(CamelCaseSettings):
    """Base class for Pydantic settings with environment overrides.

    Classes that inherit from this base class will prioritize environment
    variables over arguments to the class constructor.
    """

    @override
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Override the sources of settings.

        Deactivate :file:`.env` and secret file support. Allow environment
        variables to override init parameters, since init parameters come
        from the YAML configuration file.
        """
        return (env_settings, init_settings)


class Config(EnvFirstSettings):
    """Configuration for repoguard."""

    log_level: LogLevel = Field(
        LogLevel.INFO,
        title="Log level",
        description="Log level of the application's logger",
        validation_alias=AliasChoices("REPOGUARD_LOG_LEVEL", "logLevel"),
    )

    log_profile: Profile = Field(
        Profile.production,
        title="Logging profile",
        description=(
            "Logging profile: ``production`` logs JSON, ``development`` logs"
            " human-readable text"
        ),
        validation_alias=AliasChoices("REPOGUARD_LOG_PROFILE", "logProfile"),
    )

    shared_configuration_path: Path = Field(
        Path(SHARED_CONFIGURATION_PATH),
        title="Shared configuration path",
        description=(
            "JSON file holding the shared configuration. It is created with"
            " the default settings if it does not exist."
        ),
        validation_alias=AliasChoices(
            "REPOGUARD_SHARED_CONFIGURATION_PATH", "sharedConfigurationPath"
        ),
    )

    shared_configuration_mutable: bool = Field(
        True,
        title="Whether shared configuration is mutable",
        description=(
            "If false, the shared configuration can only be changed by"
            " editing the file and restarting"
        ),
        validation_alias=AliasChoices(
            "REPOGUARD_SHARED_CONFIGURATION_MUTABLE",
            "sharedConfigurationMutable",
        ),
    )

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Construct a Config object from a configuration file.

        Parameters
        ----------
        path
            Path to the configuration file in YAML.

        Returns
        -------
        Config
            The corresponding `Config` object.
        """
        with path.open("r") as f:
            data: dict[str, Any] | None = yaml.safe_load(f)
        return cls(**(data or {}))

    def configure_logging(self) -> None:
        """Configure logging based on the repoguard configuration."""
        configure_logging(
            name="repoguard",
            profile=self.log_profile,
            log_level=self.log_level,
        )
