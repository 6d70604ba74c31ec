"""Settings domains of the shared configuration.

Each model here is the value of one settings domain. Values are immutable so
that a reader holding one always has a consistent view; changing settings
replaces the whole value. The JSON form uses camel-case field names, which
is also the form used in the shared configuration document.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .token import AccessTokenType

__all__ = [
    "FrontendSettings",
    "LdapSettings",
    "SharedSettings",
    "StatisticsInterval",
    "StatisticsSettings",
]


class SharedSettings(BaseModel):
    """Base class for the value of a settings domain."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        revalidate_instances="always",
    )

    domain_name: ClassVar[str]
    """Stable name of the domain, used as its key in the document."""


class LdapSettings(SharedSettings):
    """Settings for authentication against an LDAP directory."""

    domain_name = "ldap"

    enabled: bool = Field(
        False,
        title="Enabled",
        description="Whether LDAP authentication is attempted at all",
    )

    hostname: str = Field(
        "ldap.domain.com",
        title="Hostname",
        description="Host name of the LDAP server",
        min_length=1,
    )

    port: int = Field(
        389,
        title="Port",
        description="Port of the LDAP server",
        ge=1,
        le=65535,
    )

    base_dn: str = Field(
        "dc=company,dc=com",
        title="Base DN",
        description="Base distinguished name of user searches",
    )

    search_user_dn: str = Field(
        "cn=repoguard,ou=admins,dc=domain,dc=com",
        title="Search user DN",
        description="Distinguished name of the service account used to search",
    )

    search_user_password: str = Field(
        "repoguard-admin-secret",
        title="Search user password",
        description="Password of the search service account",
        repr=False,
    )

    user_attribute: str = Field(
        "cn",
        title="User attribute",
        description=(
            "Attribute holding the user name. Its single value must match the"
            " requested name exactly."
        ),
        min_length=1,
    )

    user_filter: str = Field(
        "(&(objectClass=person)(ou=Maven Users))",
        title="User filter",
        description=(
            "Additional LDAP filter appended verbatim to the search for the"
            " authenticated user, such as a group membership constraint"
        ),
    )

    user_type: AccessTokenType = Field(
        AccessTokenType.PERSISTENT,
        title="User type",
        description="Type of access token created for new LDAP users",
    )

    @property
    def url(self) -> str:
        """URL of the LDAP server."""
        return f"ldap://{self.hostname}:{self.port}"


class FrontendSettings(SharedSettings):
    """Settings describing the repository to its users."""

    domain_name = "frontend"

    id: str = Field(
        "repoguard-repository",
        title="ID",
        description="Repository identifier, used in generated snippets",
    )

    title: str = Field("Repoguard Repository", title="Title")

    description: str = Field(
        "Public Maven repository hosted through repoguard",
        title="Description",
    )

    organization_website: str = Field(
        "https://repoguard.example.com", title="Organization website"
    )

    organization_logo: str = Field(
        "https://repoguard.example.com/logo.png", title="Organization logo"
    )

    icp_license: str = Field(
        "",
        title="ICP license",
        description="ICP license number shown in the footer, if any",
    )


class StatisticsInterval(Enum):
    """Period over which resolved request counts are aggregated."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class StatisticsSettings(SharedSettings):
    """Settings for request statistics."""

    domain_name = "statistics"

    resolved_requests_interval: StatisticsInterval = Field(
        StatisticsInterval.MONTHLY,
        title="Resolved requests interval",
        description="Period over which resolved requests are counted",
    )
