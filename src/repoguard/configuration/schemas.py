"""JSON schemas of settings domains.

Schemas are normally generated ahead of time with ``repoguard
generate-schemas`` and shipped as package data, one file per settings type
named after the fully-qualified name of the type. A type without a shipped
schema has its schema generated once at runtime, when its domain is
registered.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Callable
from importlib.resources import files
from importlib.resources.abc import Traversable
from io import BytesIO
from typing import BinaryIO

from structlog.stdlib import BoundLogger

from ..constants import SCHEMA_PACKAGE
from ..models.settings import SharedSettings

__all__ = [
    "GeneratedSchema",
    "RuntimeSchema",
    "SchemaLoader",
    "SchemaSupplier",
    "generate_schema",
    "qualified_name",
    "resolve_schema",
]

SchemaSupplier = Callable[[], BinaryIO]
"""Callable returning a fresh stream over the JSON text of a schema."""


def qualified_name(settings_type: type[SharedSettings]) -> str:
    """Return the fully-qualified name of a settings type."""
    return f"{settings_type.__module__}.{settings_type.__qualname__}"


def generate_schema(settings_type: type[SharedSettings]) -> str:
    """Generate the JSON schema of a settings type.

    Parameters
    ----------
    settings_type
        Settings model.

    Returns
    -------
    str
        Pretty-printed JSON schema using the camel-case field names of the
        shared configuration document.
    """
    schema = settings_type.model_json_schema(by_alias=True)
    return json.dumps(schema, indent=2) + "\n"


class GeneratedSchema:
    """A schema generated ahead of time and shipped with the package.

    Parameters
    ----------
    name
        Fully-qualified name of the settings type.
    resource
        File holding the schema.
    """

    def __init__(self, name: str, resource: Traversable) -> None:
        self.name = name
        self._resource = resource

    def get_content(self) -> BinaryIO:
        """Open the schema for reading."""
        return self._resource.open("rb")


class RuntimeSchema:
    """A schema generated on first use and then cached.

    Concurrent first calls are serialized so the schema is only generated
    once.

    Parameters
    ----------
    settings_type
        Settings model whose schema to generate.
    """

    def __init__(self, settings_type: type[SharedSettings]) -> None:
        self._settings_type = settings_type
        self._content: bytes | None = None
        self._lock = threading.Lock()

    def __call__(self) -> BinaryIO:
        if self._content is None:
            with self._lock:
                if self._content is None:
                    schema = generate_schema(self._settings_type)
                    self._content = schema.encode()
        return BytesIO(self._content)


class SchemaLoader:
    """Find the precomputed schemas shipped in a package.

    Parameters
    ----------
    package
        Name of the package holding the schema files.
    """

    def __init__(self, package: str = SCHEMA_PACKAGE) -> None:
        self._package = package

    def load_generated_schemas(self) -> dict[str, GeneratedSchema]:
        """Return the shipped schemas keyed by settings type name."""
        schemas = {}
        for resource in files(self._package).iterdir():
            if resource.is_file() and resource.name.endswith(".json"):
                name = resource.name.removesuffix(".json")
                schemas[name] = GeneratedSchema(name, resource)
        return schemas


def resolve_schema(
    settings_type: type[SharedSettings],
    known_schemas: dict[str, GeneratedSchema],
    logger: BoundLogger,
) -> SchemaSupplier:
    """Choose where the schema of a settings type comes from.

    Parameters
    ----------
    settings_type
        Settings model.
    known_schemas
        Precomputed schemas keyed by fully-qualified type name.
    logger
        Logger used to warn about schemas that must be generated.

    Returns
    -------
    SchemaSupplier
        Supplier of the precomputed schema if there is one, otherwise of a
        schema generated here and cached.

    Raises
    ------
    pydantic.errors.PydanticInvalidForJsonSchema
        Raised if no schema was packaged and none can be generated.
    """
    name = qualified_name(settings_type)
    if name in known_schemas:
        return known_schemas[name].get_content
    logger.warning(
        "Cannot find schema, it will be generated at runtime",
        settings_type=name,
    )
    schema = RuntimeSchema(settings_type)

    # Generate now so that a model without a valid schema fails at startup.
    schema()
    return schema
