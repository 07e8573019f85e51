"""
Thread-safe token cache with expiration tracking.

This module provides in-memory caching of short-lived SORACOM session
material (API key, session token and operator id) keyed by credential
identity. Records carry an absolute expiry instant and are considered
invalid a fixed safety buffer before that instant, so a token is never
handed out when it might expire mid-request.

Expiry is checked lazily on read: there is no background sweeper, and an
expired record is evicted the first time it is looked up.

Thread Safety:
    All cache operations are protected by a lock. The server runs on a
    single event loop, but the lock keeps the cache safe if it is ever
    shared with worker threads.

Example:
    >>> cache = TokenCache()
    >>> identity = credential_identity("keyId-xxx")
    >>> cache.set(identity, CachedToken("api-key", "token", "OP0012345678", expires_at))
    >>> record = cache.get(identity)
    >>> if record:
    ...     # Reuse cached session
    >>> else:
    ...     # Expired or never cached, authenticate again
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

logger = logging.getLogger(__name__)

# Token timing constants
TOKEN_CACHE_DURATION = timedelta(hours=1)  # Lifetime assigned to a freshly issued token
TOKEN_EXPIRY_BUFFER = timedelta(minutes=5)  # Treat as expired this long before expires_at

IDENTITY_PREFIX = "auth:"


def credential_identity(auth_key_id: str) -> str:
    """
    Derive the cache identity for a long-lived credential.

    Only the key identifier participates; the secret is never part of the key.
    """
    return f"{IDENTITY_PREFIX}{auth_key_id}"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class CachedToken:
    """
    Short-lived session material with an absolute expiry instant.

    Attributes:
        api_key: Short-lived API key (X-Soracom-API-Key)
        token: Short-lived session token (X-Soracom-Token)
        operator_id: Operator id resolved by the auth exchange
        expires_at: UTC instant after which the token must not be used
    """

    api_key: str = field(repr=False)
    token: str = field(repr=False)
    operator_id: str
    expires_at: datetime

    def is_valid(
        self,
        buffer: timedelta = TOKEN_EXPIRY_BUFFER,
        now: datetime | None = None,
    ) -> bool:
        """
        Check if token is still usable with safety buffer.

        Args:
            buffer: Time before expires_at at which the token becomes invalid.
            now: Reference instant, defaults to current UTC time.

        Returns:
            True if now < expires_at - buffer.
        """
        now = now or _utcnow()
        return now < self.expires_at - buffer

    def remaining_lifetime(self, now: datetime | None = None) -> timedelta:
        """Time left before expires_at (negative once expired)."""
        return self.expires_at - (now or _utcnow())


class TokenCache:
    """
    Thread-safe cache for authenticated session tokens.

    Maintains an in-memory map of credential identity to CachedToken. A
    record is returned only while it is valid; the first read after the
    validity window closes evicts it.

    Args:
        expiry_buffer: Safety buffer applied on every read.
        clock: Callable returning the current UTC time. Injected in tests.
    """

    def __init__(
        self,
        expiry_buffer: timedelta = TOKEN_EXPIRY_BUFFER,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._tokens: dict[str, CachedToken] = {}
        self._lock = threading.Lock()
        self.expiry_buffer = expiry_buffer
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def get(self, identity: str) -> CachedToken | None:
        """
        Get cached token if still valid.

        Evicts the record when it is expired or within the expiry buffer.

        Args:
            identity: Credential identity (see credential_identity)

        Returns:
            CachedToken if cached and valid, None otherwise.
        """
        with self._lock:
            cached = self._tokens.get(identity)
            if cached is None:
                logger.debug("No cached auth found", extra={"identity": identity})
                return None

            if not cached.is_valid(self.expiry_buffer, now=self._clock()):
                del self._tokens[identity]
                logger.info(
                    "Cached auth token expired or expiring soon",
                    extra={"identity": identity, "expires_at": cached.expires_at.isoformat()},
                )
                return None

            logger.debug(
                "Using cached auth token",
                extra={"identity": identity, "expires_at": cached.expires_at.isoformat()},
            )
            return cached

    def set(self, identity: str, record: CachedToken) -> None:
        """
        Cache a token, overwriting any existing record for the identity.

        Args:
            identity: Credential identity
            record: Session material to cache
        """
        with self._lock:
            self._tokens[identity] = record
        logger.info(
            "Auth token cached",
            extra={"identity": identity, "expires_at": record.expires_at.isoformat()},
        )

    def clear(self, identity: str | None = None) -> None:
        """
        Clear one or all cached tokens.

        Args:
            identity: Specific identity to clear. If None, clears all tokens.
        """
        with self._lock:
            if identity:
                self._tokens.pop(identity, None)
                logger.debug("Cleared token cache", extra={"identity": identity})
            else:
                count = len(self._tokens)
                self._tokens.clear()
                logger.info("Cleared all cached tokens", extra={"entries_cleared": count})

    def __contains__(self, identity: object) -> bool:
        """Raw membership check without expiry evaluation."""
        with self._lock:
            return identity in self._tokens

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)


__all__ = [
    "TokenCache",
    "CachedToken",
    "credential_identity",
    "TOKEN_CACHE_DURATION",
    "TOKEN_EXPIRY_BUFFER",
]
