"""Data models for LDAP."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["SearchEntry"]


@dataclass(frozen=True, slots=True)
class SearchEntry:
    """One entry returned by an LDAP search."""

    dn: str
    """Distinguished name of the entry."""

    attributes: dict[str, list[str]] = field(default_factory=dict)
    """Requested attributes mapped to their values, in directory order."""
