"""Shared configuration made of independently updated settings domains."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any, TypeVar

from structlog.stdlib import BoundLogger

from ..exceptions import (
    ConfigurationProviderError,
    DuplicateDomainError,
    SharedSettingsUpdateError,
)
from ..models.settings import SharedSettings
from ..reactive import MutableReference
from ..services.failure import FailureService
from .domains import SettingsDomain, SharedSettingsProvider
from .providers import ConfigurationProvider
from .schemas import GeneratedSchema, resolve_schema

S = TypeVar("S", bound=SharedSettings)

__all__ = ["SharedConfigurationService"]


class SharedConfigurationService:
    """Load, update, and persist the shared configuration.

    The shared configuration document is a JSON object whose keys are domain
    names and whose values are the serialized settings of each domain.
    Domains are updated independently: a bad value for one domain does not
    prevent the others from being updated.

    All domains of ``settings_provider`` are registered on construction.
    Further domains may be registered with `register` during startup, before
    the service is handed to any consumer.

    Parameters
    ----------
    settings_provider
        Owner of the live values of the domains.
    configuration_provider
        Storage of the shared configuration document.
    known_schemas
        Precomputed JSON schemas keyed by fully-qualified type name.
    failure_service
        Where to report domains that could not be updated.
    logger
        Logger to use.

    Raises
    ------
    DuplicateDomainError
        Raised if two domains have the same name.
    """

    def __init__(
        self,
        *,
        settings_provider: SharedSettingsProvider,
        configuration_provider: ConfigurationProvider,
        known_schemas: dict[str, GeneratedSchema],
        failure_service: FailureService,
        logger: BoundLogger,
    ) -> None:
        self._settings_provider = settings_provider
        self._provider = configuration_provider
        self._known_schemas = known_schemas
        self._failures = failure_service
        self._logger = logger
        self._domains: dict[str, SettingsDomain[Any]] = {}
        self._references: dict[
            type[SharedSettings], MutableReference[Any]
        ] = {}
        for settings_type, reference in settings_provider.domains.items():
            self.register(settings_type, reference)

    def register(
        self, settings_type: type[S], reference: MutableReference[S]
    ) -> SettingsDomain[S]:
        """Register a settings domain.

        Parameters
        ----------
        settings_type
            Model of the domain's value.
        reference
            Live value of the domain.

        Returns
        -------
        SettingsDomain
            The registered domain.

        Raises
        ------
        DuplicateDomainError
            Raised if a domain with the same name is already registered.
        pydantic.errors.PydanticInvalidForJsonSchema
            Raised if the domain has no packaged schema and its schema cannot
            be generated.
        """
        name = settings_type.domain_name
        if name in self._domains:
            raise DuplicateDomainError(name)
        schema = resolve_schema(
            settings_type, self._known_schemas, self._logger
        )
        domain = SettingsDomain(settings_type, reference, schema)
        self._domains[name] = domain
        self._references[settings_type] = reference
        return domain

    def fetch_configuration(self) -> str:
        """Return the stored document exactly as the provider returns it."""
        return self._provider.fetch_configuration()

    def load_from_document(self, content: str) -> None:
        """Update every registered domain present in a document.

        Domains missing from the document keep their values, and keys that
        do not name a registered domain are ignored. A document that is not
        a JSON object updates nothing and is not an error.

        Parameters
        ----------
        content
            The shared configuration document.

        Raises
        ------
        SharedSettingsUpdateError
            Raised if any domain present in the document could not be
            updated. All other domains have still been updated.
        """
        try:
            document = json.loads(content)
        except ValueError:
            document = {}
        if not isinstance(document, dict):
            document = {}

        updated = []
        errors: list[tuple[str, Exception]] = []
        for name, domain in self._domains.items():
            if name not in document:
                continue
            try:
                domain.update(document[name])
            except ValueError as e:
                errors.append((name, e))
            else:
                updated.append(name)

        if updated:
            self._logger.info(
                "Loaded shared configuration domains",
                domains=updated,
                source=self._provider.name(),
            )
        for name, error in errors:
            self._logger.error(
                f"Cannot update shared configuration domain {name}",
                domain=name,
                error=str(error),
            )
            self._logger.debug("Shared configuration source", source=content)
            self._failures.report_failure("Shared configuration", error)

        if errors:
            raise SharedSettingsUpdateError(errors)

    def load_from_provider(self) -> None:
        """Load the stored document, seeding it if the provider asks for it.

        If the provider reports that its document must be rewritten and it
        is mutable, the full current configuration (defaults overlaid with
        whatever could be loaded) is written back.

        Raises
        ------
        ConfigurationProviderError
            Raised if the document could not be read or written.
        SharedSettingsUpdateError
            Raised if any domain in the stored document was invalid.
        """
        self.load_from_document(self.fetch_configuration())
        if self._provider.is_update_required() and self._provider.is_mutable():
            self._provider.update_configuration(self.render_configuration())

    def update_domain(self, name: str, value: S | dict[str, Any]) -> S | None:
        """Update one domain and persist the whole configuration.

        The result of the update is independent of persistence. If the new
        value was committed but the document could not be written, the
        failure is logged and reported and the committed value is still
        returned.

        Parameters
        ----------
        name
            Name of the domain.
        value
            New value of the domain, as a model or in serialized form.

        Returns
        -------
        SharedSettings or None
            The committed value, or `None` if no such domain is registered.

        Raises
        ------
        pydantic.ValidationError
            Raised if the value is not valid for the domain. Nothing is
            persisted in that case.
        """
        domain = self._domains.get(name)
        if not domain:
            return None
        settings = domain.update(value)
        self._logger.info("Updated shared configuration domain", domain=name)
        try:
            self._provider.update_configuration(self.render_configuration())
        except ConfigurationProviderError as e:
            self._logger.exception(
                "Cannot persist shared configuration", error=str(e)
            )
            self._failures.report_failure("Shared configuration", e)
        return settings

    def render_configuration(self) -> str:
        """Serialize the current values of all domains into one document."""
        document = {n: d.serialize() for n, d in self._domains.items()}
        return json.dumps(document, indent=2)

    def get_domain(self, name: str) -> SettingsDomain[Any] | None:
        """Return the named domain, or `None` if it is not registered."""
        return self._domains.get(name)

    def get_domain_settings(
        self, settings_type: type[S]
    ) -> MutableReference[S]:
        """Return the live value of a domain by its settings type.

        Parameters
        ----------
        settings_type
            Model of the domain's value.

        Returns
        -------
        MutableReference
            Live value shared with every other consumer of the domain.

        Raises
        ------
        KeyError
            Raised if no domain of that type is registered.
        """
        return self._references[settings_type]

    def get_domain_names(self) -> Iterable[str]:
        """Return the names of the registered domains."""
        return self._domains.keys()

    def is_update_required(self) -> bool:
        """Whether the stored document should be rewritten from defaults."""
        return self._provider.is_update_required()

    def is_mutable(self) -> bool:
        """Whether the configuration may be changed at runtime."""
        return self._provider.is_mutable()

    def get_provider_name(self) -> str:
        """Return the name of the configuration provider."""
        return self._provider.name()
