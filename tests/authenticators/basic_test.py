"""Tests for authentication with access token secrets."""

from __future__ import annotations

import pytest

from repoguard.authenticators.basic import BasicAuthenticator
from repoguard.exceptions import UnauthorizedError
from repoguard.models.credentials import Credentials

from ..support.tokens import MockAccessTokenService


@pytest.mark.asyncio
async def test_authenticate(token_service: MockAccessTokenService) -> None:
    authenticator = BasicAuthenticator(token_service)
    token = token_service.add_token("deploy", "deploy-secret")
    assert authenticator.enabled()
    assert authenticator.realm() == "Basic"

    result = await authenticator.authenticate(
        Credentials("deploy", "deploy-secret")
    )
    assert result == token

    with pytest.raises(UnauthorizedError):
        await authenticator.authenticate(Credentials("deploy", "wrong"))
    with pytest.raises(UnauthorizedError):
        await authenticator.authenticate(Credentials("unknown", "secret"))
