"""Constants used in tests."""

from __future__ import annotations

from repoguard.models.settings import LdapSettings
from repoguard.models.token import AccessTokenType

__all__ = ["TEST_LDAP_SETTINGS"]

TEST_LDAP_SETTINGS = LdapSettings(
    enabled=True,
    hostname="ldap.example.com",
    port=389,
    base_dn="dc=example,dc=com",
    search_user_dn="cn=search,ou=admins,dc=example,dc=com",
    search_user_password="search-password",
    user_attribute="uid",
    user_filter="(memberOf=cn=maven,ou=groups,dc=example,dc=com)",
    user_type=AccessTokenType.TEMPORARY,
)
"""LDAP settings used by the LDAP tests."""
