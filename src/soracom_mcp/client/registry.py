"""
Registry of authenticated SORACOM clients.

Holds at most one SoracomClient per (credential identity, coverage) pair
for the lifetime of the process. Acquisition always runs authentication,
which is a cheap cache hit while the shared TokenCache holds a valid
token. Creation of a new entry is serialized per key so concurrent first
acquisitions share one entry and one remote authentication.

The registry is an explicitly constructed object owned by the server; it
is torn down with dispose_all() at shutdown.
"""

import asyncio
import logging

from core.auth.token_cache import TokenCache
from soracom_mcp.client.auth import Authenticator
from soracom_mcp.client.client import SoracomClient
from soracom_mcp.client.models import DEFAULT_ENDPOINTS, AuthCredentials, Coverage
from soracom_mcp.client.transport import DEFAULT_TIMEOUT_SECONDS, SoracomTransport

logger = logging.getLogger(__name__)

ClientKey = tuple[str, Coverage]


class ClientRegistry:
    """
    Process-wide cache of authenticated clients.

    Args:
        token_cache: Shared token cache consulted on every authentication
        endpoints: Base URL per coverage type
        timeout_seconds: Fixed per-request timeout for every transport
        user_agent: User-Agent override for outbound requests
    """

    def __init__(
        self,
        token_cache: TokenCache,
        endpoints: dict[Coverage, str] | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str | None = None,
    ):
        self.token_cache = token_cache
        self.endpoints = {**DEFAULT_ENDPOINTS, **(endpoints or {})}
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.authenticator = Authenticator(token_cache)

        self._clients: dict[ClientKey, SoracomClient] = {}
        self._locks: dict[ClientKey, asyncio.Lock] = {}
        self._pending: dict[ClientKey, int] = {}

    @staticmethod
    def client_key(credentials: AuthCredentials, coverage: Coverage) -> ClientKey:
        return (credentials.identity, coverage)

    def _create_client(self, coverage: Coverage) -> SoracomClient:
        base_url = self.endpoints[coverage]
        logger.info(
            "Creating SoracomClient",
            extra={
                "coverage": coverage.value,
                "base_url": base_url,
                "timeout_seconds": self.timeout_seconds,
            },
        )
        transport = SoracomTransport(
            base_url,
            timeout_seconds=self.timeout_seconds,
            user_agent=self.user_agent,
        )
        return SoracomClient(coverage, transport, self.authenticator)

    async def acquire(
        self, credentials: AuthCredentials, coverage: Coverage | str = Coverage.JP
    ) -> SoracomClient:
        """
        Get the authenticated client for credentials and coverage.

        The entry is stored before authentication. If authentication fails
        the entry is removed from the registry and the error propagates.
        The session is closed only when this call created the entry; an
        existing entry may still be held by in-flight invocations.

        Raises:
            AuthenticationError: Credential exchange failed
        """
        coverage = Coverage.parse(coverage, default=Coverage.JP)
        key = self.client_key(credentials, coverage)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._pending[key] = self._pending.get(key, 0) + 1

        try:
            async with lock:
                client = self._clients.get(key)
                created = client is None
                if created:
                    logger.debug(
                        "Creating new registry entry",
                        extra={
                            "auth_key_id": credentials.masked_key_id,
                            "coverage": coverage.value,
                        },
                    )
                    client = self._create_client(coverage)
                    self._clients[key] = client

                try:
                    await client.authenticate(credentials)
                except Exception:
                    if self._clients.get(key) is client:
                        del self._clients[key]
                    if created:
                        await client.close()
                    raise
        finally:
            self._release_lock(key, lock)

        return client

    def _release_lock(self, key: ClientKey, lock: asyncio.Lock) -> None:
        """Drop the per-key lock once no caller waits on it and no entry remains."""
        remaining = self._pending.get(key, 0) - 1
        if remaining > 0:
            self._pending[key] = remaining
            return
        self._pending.pop(key, None)
        if key not in self._clients and self._locks.get(key) is lock:
            del self._locks[key]

    async def dispose(self, client: SoracomClient) -> None:
        """
        Log out (best effort), evict the entry, and close its session.

        Never raises; logout failures are logged and swallowed.
        """
        if client.is_authenticated:
            try:
                await client.logout()
            except Exception as e:
                logger.warning(
                    "Logout failed during disposal",
                    extra={
                        "coverage": client.coverage.value,
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                    },
                )

        client.reset()

        if client.credentials is not None:
            key = self.client_key(client.credentials, client.coverage)
            if self._clients.get(key) is client:
                del self._clients[key]
                self._locks.pop(key, None)
        else:
            for key, entry in list(self._clients.items()):
                if entry is client:
                    del self._clients[key]

        try:
            await client.close()
        except Exception as e:
            logger.warning(
                "Error closing client session",
                extra={"coverage": client.coverage.value, "error": str(e)},
            )

    async def dispose_all(self) -> None:
        """Dispose every entry concurrently, then clear the registry."""
        clients = list(self._clients.values())
        results = await asyncio.gather(
            *(self.dispose(client) for client in clients),
            return_exceptions=True,
        )

        failed = sum(1 for result in results if isinstance(result, BaseException))
        self._clients.clear()
        self._locks.clear()

        logger.info(
            "All client instances cleared",
            extra={"count": len(clients), "failed": failed},
        )

    def is_authenticated(self, client: SoracomClient) -> bool:
        return client.is_authenticated

    def operator_id(self, client: SoracomClient) -> str | None:
        return client.operator_id

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, key: object) -> bool:
        return key in self._clients


__all__ = ["ClientKey", "ClientRegistry"]
