"""
Authentication support.

Components:
    - TokenCache: Thread-safe cache of short-lived session tokens with
      expiry buffer and lazy eviction
    - credential_identity: Cache key derivation from the auth key id
"""

from .token_cache import (
    TOKEN_CACHE_DURATION,
    TOKEN_EXPIRY_BUFFER,
    CachedToken,
    TokenCache,
    credential_identity,
)

__all__ = [
    "TokenCache",
    "CachedToken",
    "credential_identity",
    "TOKEN_CACHE_DURATION",
    "TOKEN_EXPIRY_BUFFER",
]
