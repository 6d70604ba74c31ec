"""Constants for repoguard."""

__all__ = [
    "BASIC_AUTH_METHODS",
    "CONFIG_PATH",
    "FAILURE_HISTORY_SIZE",
    "LDAP_FILTER_ERROR",
    "LDAP_PERSON_FILTER",
    "LDAP_TIMEOUT",
    "SCHEMA_PACKAGE",
    "SHARED_CONFIGURATION_PATH",
]

BASIC_AUTH_METHODS = ("Basic", "xBasic")
"""Authorization header prefixes that introduce Basic credentials.

``xBasic`` is sent by the dashboard instead of ``Basic`` so that browsers do
not show their built-in login prompt when the server answers with a 401. The
two are otherwise handled identically.
"""

CONFIG_PATH = "/etc/repoguard/repoguard.yaml"
"""Default configuration path."""

FAILURE_HISTORY_SIZE = 100
"""Maximum number of recorded failures kept in memory."""

LDAP_FILTER_ERROR = -7
"""Client library result code for a malformed search filter."""

LDAP_PERSON_FILTER = "(objectClass=person)"
"""Filter component restricting directory searches to person entries."""

LDAP_TIMEOUT = 5.0
"""Timeout (in seconds) for LDAP binds and searches."""

SCHEMA_PACKAGE = "repoguard.schemas"
"""Package holding the precomputed JSON schemas of settings domains."""

SHARED_CONFIGURATION_PATH = "/var/lib/repoguard/configuration.shared.json"
"""Default path of the shared configuration document."""
