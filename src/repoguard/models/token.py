"""Representation of access tokens owned by the token service."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field
from safir.datetime import current_datetime

__all__ = [
    "AccessToken",
    "AccessTokenType",
    "CreateAccessTokenRequest",
    "CreateAccessTokenResponse",
]


class AccessTokenType(Enum):
    """The lifetime class of an access token."""

    PERSISTENT = "PERSISTENT"
    """Stored by the token service and kept across restarts."""

    TEMPORARY = "TEMPORARY"
    """Kept in memory only and dropped on restart."""


class AccessToken(BaseModel):
    """An identity known to the token service."""

    identifier: int = Field(
        ..., title="Identifier", description="Unique numeric identifier"
    )

    name: str = Field(..., title="Name", description="Name of the token")

    type: AccessTokenType = Field(
        AccessTokenType.PERSISTENT,
        title="Token type",
        description="Whether the token survives restarts",
    )

    created_at: datetime = Field(
        default_factory=current_datetime,
        title="Creation time",
        description="When the token was created",
    )


class CreateAccessTokenRequest(BaseModel):
    """Request to create a new access token."""

    type: AccessTokenType = Field(..., title="Token type")

    name: str = Field(..., title="Name of the new token")

    secret: str | None = Field(
        None,
        title="Secret",
        description="Secret to assign, or `None` to generate one",
        repr=False,
    )


class CreateAccessTokenResponse(BaseModel):
    """Result of creating an access token."""

    access_token: AccessToken = Field(..., title="Created token")

    secret: str = Field(..., title="Secret of the token", repr=False)
