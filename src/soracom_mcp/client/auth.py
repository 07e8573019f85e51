"""
Credential exchange against the SORACOM auth endpoint.

The Authenticator swaps long-lived credentials (auth key id + secret) for
short-lived session material and writes it to the shared TokenCache. A
cached, still-valid record is adopted without any remote call.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from core.auth.token_cache import TOKEN_CACHE_DURATION, CachedToken, TokenCache
from core.errors.exceptions import AuthenticationError, SoracomError
from soracom_mcp.client.models import AuthCredentials

if TYPE_CHECKING:
    from soracom_mcp.client.client import SoracomClient

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth"


class Authenticator:
    """
    Populates a SoracomClient with short-lived session material.

    Args:
        token_cache: Shared token cache
        cache_duration: Lifetime assigned to a freshly issued token
        clock: Current UTC time source (defaults to the cache's clock)
    """

    def __init__(
        self,
        token_cache: TokenCache,
        cache_duration: timedelta = TOKEN_CACHE_DURATION,
        clock: Callable[[], datetime] | None = None,
    ):
        self.token_cache = token_cache
        self.cache_duration = cache_duration
        self._clock = clock or token_cache.now

    async def authenticate(
        self,
        client: "SoracomClient",
        credentials: AuthCredentials,
        use_cache: bool = True,
    ) -> None:
        """
        Authenticate a client, reusing a cached token when one is valid.

        Credentials are stored on the client first so a later 401 can
        re-authenticate with them.

        Raises:
            AuthenticationError: Remote exchange rejected or unreachable
        """
        client.credentials = credentials
        identity = credentials.identity

        if use_cache:
            cached = self.token_cache.get(identity)
            if cached is not None:
                client.adopt(cached.api_key, cached.token, cached.operator_id)
                return

        logger.info(
            "Authenticating with SORACOM API",
            extra={
                "auth_key_id": credentials.masked_key_id,
                "coverage": client.coverage.value,
            },
        )

        try:
            body = await client.transport.post(
                AUTH_PATH,
                {"authKeyId": credentials.auth_key_id, "authKey": credentials.auth_key},
                authenticated=False,
            )
        except SoracomError as e:
            message = getattr(e, "api_message", None) or e.message
            logger.error(
                "Authentication failed",
                extra={
                    "auth_key_id": credentials.masked_key_id,
                    "coverage": client.coverage.value,
                    "error_message": message,
                },
            )
            raise AuthenticationError(f"Authentication failed: {message}", cause=e) from e

        try:
            api_key = body["apiKey"]
            token = body["token"]
            operator_id = body["operatorId"]
        except (KeyError, TypeError) as e:
            raise AuthenticationError(
                "Authentication failed: unexpected response from auth endpoint"
            ) from e

        client.adopt(api_key, token, operator_id)

        self.token_cache.set(
            identity,
            CachedToken(
                api_key=api_key,
                token=token,
                operator_id=operator_id,
                expires_at=self._clock() + self.cache_duration,
            ),
        )

        logger.info(
            "Authentication successful",
            extra={"operator_id": operator_id, "coverage": client.coverage.value},
        )


__all__ = ["AUTH_PATH", "Authenticator"]
