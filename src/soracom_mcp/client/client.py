"""
Authenticated SORACOM client (one client registry entry).

A SoracomClient owns the transport for one (credential identity, coverage)
pair, the current short-lived session material, and the long-lived
credentials needed to re-authenticate. Instances are created by
ClientRegistry only; callers hold a handle and call the resource groups
(``client.sim``, ``client.billing`` ...).

State machine:
    unauthenticated -> authenticated    (authenticate / cache hit)
    authenticated   -> unauthenticated  (logout, or 401 before re-auth)
"""

import logging

from core.errors.exceptions import LogoutError, NotAuthenticatedError, SoracomError
from soracom_mcp.api import BillingApi, CellLocationApi, GroupApi, QueryApi, SimApi, StatsApi
from soracom_mcp.client.auth import Authenticator
from soracom_mcp.client.models import AuthCredentials, Coverage
from soracom_mcp.client.transport import API_KEY_HEADER, TOKEN_HEADER, SoracomTransport

logger = logging.getLogger(__name__)

LOGOUT_PATH = "/auth/logout"


class SoracomClient:
    """
    Authenticated client bound to one coverage endpoint.

    Installs itself as the transport's auth handler so every outbound call
    carries the current session headers and a 401 can be recovered once.
    """

    def __init__(
        self,
        coverage: Coverage,
        transport: SoracomTransport,
        authenticator: Authenticator,
    ):
        self.coverage = coverage
        self.transport = transport
        self.authenticator = authenticator
        self.credentials: AuthCredentials | None = None

        self._api_key: str | None = None
        self._token: str | None = None
        self._operator_id: str | None = None

        transport.auth = self

        self.sim = SimApi(transport)
        self.billing = BillingApi(transport)
        self.group = GroupApi(transport)
        self.query = QueryApi(transport)
        self.cell_location = CellLocationApi(transport)
        self.stats = StatsApi(transport, lambda: self._operator_id)

    def __repr__(self) -> str:
        return (
            f"SoracomClient(coverage={self.coverage.value!r}, "
            f"base_url={self.transport.base_url!r}, authenticated={self.is_authenticated})"
        )

    @property
    def is_authenticated(self) -> bool:
        return bool(self._api_key and self._token)

    @property
    def operator_id(self) -> str | None:
        return self._operator_id

    # Auth handler interface used by SoracomTransport

    @property
    def can_reauthenticate(self) -> bool:
        return self.credentials is not None and self.credentials.is_complete

    def auth_headers(self) -> dict[str, str]:
        if not self.is_authenticated:
            return {}
        return {API_KEY_HEADER: self._api_key, TOKEN_HEADER: self._token}

    async def reauthenticate(self) -> None:
        """Evict the cached token, reset session state, and authenticate live."""
        if self.credentials is None:
            raise NotAuthenticatedError("No credentials available for re-authentication")

        self.authenticator.token_cache.clear(self.credentials.identity)
        self.reset()
        await self.authenticator.authenticate(self, self.credentials, use_cache=False)

    # Session state

    async def authenticate(self, credentials: AuthCredentials) -> None:
        await self.authenticator.authenticate(self, credentials)

    def adopt(self, api_key: str, token: str, operator_id: str) -> None:
        self._api_key = api_key
        self._token = token
        self._operator_id = operator_id

    def reset(self) -> None:
        """Drop short-lived session material; credentials are kept."""
        self._api_key = None
        self._token = None
        self._operator_id = None

    async def logout(self) -> None:
        """
        Revoke the current session remotely and evict its cached token.

        Raises:
            NotAuthenticatedError: No session is held
            LogoutError: Remote logout call failed
        """
        if not self.is_authenticated:
            raise NotAuthenticatedError("Not authenticated")

        try:
            await self.transport.post(LOGOUT_PATH)
        except SoracomError as e:
            raise LogoutError(f"Logout failed: {e.message}", cause=e) from e

        self.reset()
        if self.credentials is not None:
            self.authenticator.token_cache.clear(self.credentials.identity)

        logger.info("Logged out", extra={"coverage": self.coverage.value})

    async def close(self) -> None:
        await self.transport.close()


__all__ = ["LOGOUT_PATH", "SoracomClient"]
