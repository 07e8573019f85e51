"""
Tests for ClientRegistry against the fake SORACOM API.

Test Coverage:
    - One entry per (credential identity, coverage) and cache-backed reuse
    - Concurrent first acquisition shares one entry and one remote auth
    - Failed authentication leaves no entry behind
    - 401 recovery: one re-auth, one resubmit, original error on failure
    - Disposal tolerates logout failures and always empties the registry
"""

import asyncio

import pytest

from core.errors.exceptions import AuthenticationError
from soracom_mcp.client.models import AuthCredentials, Coverage
from soracom_mcp.client.registry import ClientRegistry
from soracom_mcp.client.transport import SoracomApiError


# =========================================================================
# Acquisition
# =========================================================================


class TestAcquire:

    @pytest.mark.asyncio
    async def test_acquire_authenticates(self, registry, credentials):
        client = await registry.acquire(credentials, Coverage.JP)

        assert registry.is_authenticated(client)
        assert registry.operator_id(client) == "OP0123456789"
        assert client.coverage is Coverage.JP

    @pytest.mark.asyncio
    async def test_second_acquire_reuses_entry_and_cache(self, registry, fake_api, credentials):
        first = await registry.acquire(credentials, Coverage.JP)
        second = await registry.acquire(credentials, Coverage.JP)

        assert first is second
        assert fake_api.auth_calls == 1
        assert len(registry) == 1

    @pytest.mark.asyncio
    async def test_coverage_given_as_string(self, registry, credentials):
        client = await registry.acquire(credentials, "g")
        assert client.coverage is Coverage.GLOBAL

    @pytest.mark.asyncio
    async def test_regions_get_distinct_entries(self, registry, fake_api, credentials):
        jp = await registry.acquire(credentials, Coverage.JP)
        g = await registry.acquire(credentials, Coverage.GLOBAL)

        assert jp is not g
        assert len(registry) == 2
        assert ("auth:K1", Coverage.JP) in registry
        assert ("auth:K1", Coverage.GLOBAL) in registry
        # Second region reuses the shared token cache
        assert fake_api.auth_calls == 1

    @pytest.mark.asyncio
    async def test_distinct_credentials_get_distinct_entries(self, registry, fake_api):
        a = await registry.acquire(AuthCredentials("K1", "S1"))
        b = await registry.acquire(AuthCredentials("K2", "S2"))

        assert a is not b
        assert fake_api.auth_calls == 2

    @pytest.mark.asyncio
    async def test_concurrent_first_acquire_creates_one_entry(
        self, registry, fake_api, credentials
    ):
        clients = await asyncio.gather(
            *(registry.acquire(credentials, Coverage.JP) for _ in range(5))
        )

        assert all(client is clients[0] for client in clients)
        assert len(registry) == 1
        assert fake_api.auth_calls == 1

    @pytest.mark.asyncio
    async def test_failed_auth_removes_entry(self, registry, fake_api, credentials):
        fake_api.fail_auth = True

        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await registry.acquire(credentials, Coverage.JP)

        assert len(registry) == 0
        assert ("auth:K1", Coverage.JP) not in registry

    @pytest.mark.asyncio
    async def test_failed_reacquire_leaves_held_client_usable(
        self, registry, fake_api, token_cache, credentials
    ):
        fake_api.responses["/sims/s1"] = {"simId": "s1"}
        held = await registry.acquire(credentials)
        token_cache.clear()
        fake_api.fail_auth = True

        with pytest.raises(AuthenticationError):
            await registry.acquire(credentials)

        fake_api.fail_auth = False
        try:
            assert len(registry) == 0
            assert not held.transport.closed
            assert await held.sim.get_sim("s1") == {"simId": "s1"}
        finally:
            await held.close()

    @pytest.mark.asyncio
    async def test_failed_auth_releases_lock(self, registry, fake_api, credentials):
        fake_api.fail_auth = True

        with pytest.raises(AuthenticationError):
            await registry.acquire(credentials)

        assert registry.client_key(credentials, Coverage.JP) not in registry._locks
        assert registry._pending == {}

    @pytest.mark.asyncio
    async def test_concurrent_failures_release_lock(self, registry, fake_api, credentials):
        fake_api.fail_auth = True

        results = await asyncio.gather(
            *(registry.acquire(credentials) for _ in range(3)),
            return_exceptions=True,
        )

        assert all(isinstance(result, AuthenticationError) for result in results)
        assert len(registry) == 0
        assert registry._locks == {}
        assert registry._pending == {}

    @pytest.mark.asyncio
    async def test_successful_acquire_keeps_lock(self, registry, credentials):
        await registry.acquire(credentials)

        assert registry.client_key(credentials, Coverage.JP) in registry._locks
        assert registry._pending == {}

    @pytest.mark.asyncio
    async def test_acquire_after_failure_starts_fresh(self, registry, fake_api, credentials):
        fake_api.fail_auth = True
        with pytest.raises(AuthenticationError):
            await registry.acquire(credentials)

        fake_api.fail_auth = False
        client = await registry.acquire(credentials)

        assert client.is_authenticated
        assert len(registry) == 1

    def test_custom_endpoints_merge_with_defaults(self, token_cache):
        registry = ClientRegistry(token_cache, endpoints={Coverage.JP: "http://localhost/v1"})
        assert registry.endpoints[Coverage.JP] == "http://localhost/v1"
        assert registry.endpoints[Coverage.GLOBAL] == "https://g.api.soracom.io/v1"


# =========================================================================
# 401 recovery through a registry entry
# =========================================================================


class TestUnauthorizedRecovery:

    @pytest.mark.asyncio
    async def test_revoked_token_recovers_once(
        self, registry, fake_api, token_cache, credentials
    ):
        fake_api.responses["/sims/s1"] = {"simId": "s1"}
        client = await registry.acquire(credentials)
        fake_api.revoke_tokens()

        sim = await client.sim.get_sim("s1")

        assert sim == {"simId": "s1"}
        assert fake_api.auth_calls == 2
        assert len(fake_api.calls_to("/sims/s1")) == 2
        assert token_cache.get("auth:K1").token == "token-2"

    @pytest.mark.asyncio
    async def test_persistent_401_is_not_retried_twice(self, registry, fake_api, credentials):
        client = await registry.acquire(credentials)
        fake_api.always_401 = True

        with pytest.raises(SoracomApiError) as exc_info:
            await client.sim.get_sim("s1")

        assert exc_info.value.status_code == 401
        assert fake_api.auth_calls == 2
        assert len(fake_api.calls_to("/sims/s1")) == 2

    @pytest.mark.asyncio
    async def test_failed_reauth_surfaces_original_401(
        self, registry, fake_api, token_cache, credentials
    ):
        client = await registry.acquire(credentials)
        fake_api.revoke_tokens()
        fake_api.fail_auth = True

        with pytest.raises(SoracomApiError) as exc_info:
            await client.sim.get_sim("s1")

        assert exc_info.value.status_code == 401
        assert "Invalid token" in exc_info.value.message
        assert len(fake_api.calls_to("/sims/s1")) == 1
        # The stale token was evicted before the failed exchange
        assert token_cache.get("auth:K1") is None
        assert not client.is_authenticated


# =========================================================================
# Disposal
# =========================================================================


class TestDispose:

    @pytest.mark.asyncio
    async def test_dispose_logs_out_and_evicts(
        self, registry, fake_api, token_cache, credentials
    ):
        client = await registry.acquire(credentials)

        await registry.dispose(client)

        assert fake_api.logout_calls == 1
        assert len(registry) == 0
        assert not client.is_authenticated
        assert client.transport.closed
        assert token_cache.get("auth:K1") is None

    @pytest.mark.asyncio
    async def test_dispose_swallows_logout_failure(self, registry, fake_api, credentials):
        client = await registry.acquire(credentials)
        fake_api.fail_logout = True

        await registry.dispose(client)

        assert len(registry) == 0
        assert not client.is_authenticated

    @pytest.mark.asyncio
    async def test_dispose_all_with_one_failing_logout(self, registry, fake_api):
        await registry.acquire(AuthCredentials("K1", "S1"), Coverage.JP)
        await registry.acquire(AuthCredentials("K1", "S1"), Coverage.GLOBAL)
        await registry.acquire(AuthCredentials("K2", "S2"), Coverage.JP)
        fake_api.fail_logout = True

        await registry.dispose_all()

        assert len(registry) == 0
        assert fake_api.logout_calls == 3

    @pytest.mark.asyncio
    async def test_dispose_all_on_empty_registry(self, registry):
        await registry.dispose_all()
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_acquire_after_dispose_creates_new_entry(self, registry, credentials):
        first = await registry.acquire(credentials)
        await registry.dispose(first)

        second = await registry.acquire(credentials)

        assert second is not first
        assert second.is_authenticated
