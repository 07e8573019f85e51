"""
Tests for Authenticator and SoracomClient session handling.

Test Coverage:
    - Cache hit adopts session material without a remote call
    - Remote exchange populates the client and the cache
    - Failure messages and cache state on rejected credentials
    - Logout and re-authentication on the client
"""

from datetime import UTC, datetime, timedelta

import pytest

from core.auth.token_cache import CachedToken, TokenCache
from core.errors.exceptions import AuthenticationError, LogoutError, NotAuthenticatedError
from soracom_mcp.client.auth import Authenticator
from soracom_mcp.client.client import SoracomClient
from soracom_mcp.client.models import Coverage
from soracom_mcp.client.transport import SoracomTransport

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def fixed_cache() -> TokenCache:
    return TokenCache(clock=lambda: NOW)


@pytest.fixture
async def client(base_url, fixed_cache):
    client = SoracomClient(
        Coverage.JP,
        SoracomTransport(base_url, timeout_seconds=5),
        Authenticator(fixed_cache),
    )
    yield client
    await client.close()


class TestAuthenticate:

    @pytest.mark.asyncio
    async def test_remote_exchange_populates_client(self, client, fake_api, credentials):
        await client.authenticate(credentials)

        assert client.is_authenticated
        assert client.operator_id == fake_api.operator_id
        assert client.credentials == credentials
        assert fake_api.auth_calls == 1
        assert fake_api.auth_bodies == [{"authKeyId": "K1", "authKey": "S1"}]

    @pytest.mark.asyncio
    async def test_remote_exchange_writes_cache(self, client, fixed_cache, credentials):
        await client.authenticate(credentials)

        cached = fixed_cache.get("auth:K1")
        assert cached is not None
        assert cached.token == "token-1"
        assert cached.api_key == "api-key-1"
        assert cached.operator_id == "OP0123456789"
        assert cached.expires_at == NOW + timedelta(hours=1)

    @pytest.mark.asyncio
    async def test_cache_hit_skips_remote_call(self, client, fake_api, fixed_cache, credentials):
        fake_api.valid_tokens.add("cached-token")
        fixed_cache.set(
            "auth:K1",
            CachedToken(
                api_key="cached-key",
                token="cached-token",
                operator_id="OP-CACHED",
                expires_at=NOW + timedelta(minutes=30),
            ),
        )

        await client.authenticate(credentials)

        assert fake_api.auth_calls == 0
        assert client.operator_id == "OP-CACHED"
        assert client.auth_headers()["X-Soracom-Token"] == "cached-token"

    @pytest.mark.asyncio
    async def test_expired_cache_entry_forces_remote_call(
        self, client, fake_api, fixed_cache, credentials
    ):
        fixed_cache.set(
            "auth:K1",
            CachedToken(
                api_key="old",
                token="old",
                operator_id="OP-OLD",
                expires_at=NOW + timedelta(minutes=4),
            ),
        )

        await client.authenticate(credentials)

        assert fake_api.auth_calls == 1
        assert client.operator_id == fake_api.operator_id

    @pytest.mark.asyncio
    async def test_rejected_credentials(self, client, fake_api, fixed_cache, credentials):
        fake_api.fail_auth = True

        with pytest.raises(AuthenticationError) as exc_info:
            await client.authenticate(credentials)

        assert str(exc_info.value).startswith("Authentication failed: Invalid credentials")
        assert not client.is_authenticated
        assert fixed_cache.get("auth:K1") is None


class TestClientSession:

    @pytest.mark.asyncio
    async def test_auth_headers_empty_until_authenticated(self, client, credentials):
        assert client.auth_headers() == {}
        await client.authenticate(credentials)
        assert client.auth_headers() == {
            "X-Soracom-API-Key": "api-key-1",
            "X-Soracom-Token": "token-1",
        }

    @pytest.mark.asyncio
    async def test_logout_resets_and_evicts(self, client, fake_api, fixed_cache, credentials):
        await client.authenticate(credentials)

        await client.logout()

        assert fake_api.logout_calls == 1
        assert not client.is_authenticated
        assert client.operator_id is None
        assert fixed_cache.get("auth:K1") is None
        # Credentials survive for a later re-authentication
        assert client.can_reauthenticate

    @pytest.mark.asyncio
    async def test_logout_requires_session(self, client):
        with pytest.raises(NotAuthenticatedError):
            await client.logout()

    @pytest.mark.asyncio
    async def test_logout_failure_raises_logout_error(self, client, fake_api, credentials):
        await client.authenticate(credentials)
        fake_api.fail_logout = True

        with pytest.raises(LogoutError, match="Logout failed"):
            await client.logout()

    @pytest.mark.asyncio
    async def test_reauthenticate_bypasses_cache(
        self, client, fake_api, fixed_cache, credentials
    ):
        await client.authenticate(credentials)

        await client.reauthenticate()

        assert fake_api.auth_calls == 2
        assert client.auth_headers()["X-Soracom-Token"] == "token-2"
        assert fixed_cache.get("auth:K1").token == "token-2"

    @pytest.mark.asyncio
    async def test_reauthenticate_without_credentials(self, client):
        assert not client.can_reauthenticate
        with pytest.raises(NotAuthenticatedError):
            await client.reauthenticate()
