"""Settings domains and their live values."""

from __future__ import annotations

from typing import Any, BinaryIO, Generic, TypeVar

from ..models.settings import (
    FrontendSettings,
    LdapSettings,
    SharedSettings,
    StatisticsSettings,
)
from ..reactive import MutableReference
from .schemas import SchemaSupplier

S = TypeVar("S", bound=SharedSettings)

__all__ = [
    "DEFAULT_DOMAINS",
    "SettingsDomain",
    "SharedSettingsProvider",
]

DEFAULT_DOMAINS: tuple[type[SharedSettings], ...] = (
    LdapSettings,
    FrontendSettings,
    StatisticsSettings,
)
"""Settings types that make up the shared configuration."""


class SettingsDomain(Generic[S]):
    """One named slice of the shared configuration.

    Parameters
    ----------
    settings_type
        Model of the domain's value. Its ``domain_name`` is the name of the
        domain.
    reference
        Live value of the domain.
    schema
        Supplier of the domain's JSON schema.
    """

    def __init__(
        self,
        settings_type: type[S],
        reference: MutableReference[S],
        schema: SchemaSupplier,
    ) -> None:
        self.name = settings_type.domain_name
        self.type = settings_type
        self.reference = reference
        self._schema = schema

    def __repr__(self) -> str:
        return f"SettingsDomain({self.name!r}, {self.type.__name__})"

    def get(self) -> S:
        """Return the current value."""
        return self.reference.get()

    def schema(self) -> BinaryIO:
        """Return a stream over the JSON schema of the domain."""
        return self._schema()

    def parse(self, data: Any) -> S:
        """Validate serialized settings against the domain's model.

        Parameters
        ----------
        data
            Parsed JSON value of the domain.

        Returns
        -------
        SharedSettings
            The validated value.

        Raises
        ------
        pydantic.ValidationError
            Raised if the data does not match the model.
        """
        return self.type.model_validate(data)

    def serialize(self) -> dict[str, Any]:
        """Return the current value in its JSON form."""
        return self.get().model_dump(mode="json", by_alias=True)

    def update(self, value: S | dict[str, Any]) -> S:
        """Validate and commit a new value.

        Parameters
        ----------
        value
            New value, either as a model instance (which is revalidated) or
            in its serialized form.

        Returns
        -------
        SharedSettings
            The committed value.

        Raises
        ------
        pydantic.ValidationError
            Raised if the value is not valid. The current value is then left
            unchanged.
        """
        return self.reference.update(self.parse(value))


class SharedSettingsProvider:
    """Owner of the live values of all settings domains.

    Each domain starts with the defaults of its model.

    Parameters
    ----------
    settings_types
        Settings types to create live values for.
    """

    def __init__(
        self,
        settings_types: tuple[type[SharedSettings], ...] = DEFAULT_DOMAINS,
    ) -> None:
        self.domains: dict[
            type[SharedSettings], MutableReference[SharedSettings]
        ] = {t: MutableReference(t()) for t in settings_types}
