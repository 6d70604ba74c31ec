"""Storage of the shared configuration document."""

from __future__ import annotations

import os
import tempfile
from abc import ABCMeta, abstractmethod
from pathlib import Path
from typing import override

from structlog.stdlib import BoundLogger

from ..exceptions import ConfigurationProviderError

__all__ = ["ConfigurationProvider", "FileConfigurationProvider"]


class ConfigurationProvider(metaclass=ABCMeta):
    """Abstract base class for storage of the shared configuration document.

    Providers only move text around. Parsing and validating the document is
    done by `~repoguard.configuration.shared.SharedConfigurationService`.
    """

    @abstractmethod
    def fetch_configuration(self) -> str:
        """Return the stored document.

        Raises
        ------
        ConfigurationProviderError
            Raised if the document could not be read.
        """

    @abstractmethod
    def update_configuration(self, content: str) -> None:
        """Replace the stored document.

        Parameters
        ----------
        content
            The new document.

        Raises
        ------
        ConfigurationProviderError
            Raised if the document could not be written or the provider is
            not mutable.
        """

    @abstractmethod
    def is_update_required(self) -> bool:
        """Whether the stored document should be rewritten from defaults."""

    @abstractmethod
    def is_mutable(self) -> bool:
        """Whether the document may be changed at runtime."""

    @abstractmethod
    def name(self) -> str:
        """Human-readable name of where the document is stored."""


class FileConfigurationProvider(ConfigurationProvider):
    """Store the shared configuration document in a local JSON file.

    Parameters
    ----------
    path
        Path of the document.
    logger
        Logger to use.
    mutable
        Whether runtime changes may be written back to the file.
    """

    def __init__(
        self, path: Path, logger: BoundLogger, *, mutable: bool = True
    ) -> None:
        self._path = path
        self._mutable = mutable
        self._logger = logger.bind(path=str(path))

    @override
    def fetch_configuration(self) -> str:
        if not self._path.exists():
            self._logger.debug("Shared configuration file does not exist")
            return "{}"
        try:
            return self._path.read_text()
        except OSError as e:
            msg = f"Cannot read {self._path}: {e!s}"
            raise ConfigurationProviderError(msg) from e

    @override
    def update_configuration(self, content: str) -> None:
        if not self._mutable:
            raise ConfigurationProviderError(f"{self.name()} is read-only")

        # Write to a temporary file and rename so that readers never see a
        # partial document.
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}."
            )
            try:
                with os.fdopen(fd, "w") as f:
                    f.write(content)
                Path(tmp_name).replace(self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            msg = f"Cannot write {self._path}: {e!s}"
            raise ConfigurationProviderError(msg) from e
        self._logger.info("Wrote shared configuration")

    @override
    def is_update_required(self) -> bool:
        return not self._path.exists()

    @override
    def is_mutable(self) -> bool:
        return self._mutable

    @override
    def name(self) -> str:
        return f"local file {self._path}"
