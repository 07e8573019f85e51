"""
Unified exception hierarchy for the SORACOM MCP server.

Provides typed exceptions with category classification so the transport,
the client registry and the tool layer can decide how to react to a
failure without string matching.
"""

from core.types import ErrorCategory


class SoracomError(Exception):
    """
    Base exception for all server errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for handling decisions
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.category == ErrorCategory.TRANSIENT

    @property
    def should_refresh_auth(self) -> bool:
        return self.category == ErrorCategory.AUTH

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Authentication Errors
# =============================================================================


class AuthError(SoracomError):
    """Base class for authentication errors."""

    category = ErrorCategory.AUTH


class AuthenticationError(AuthError):
    """Credential exchange was rejected or the auth endpoint was unreachable."""

    pass


class NotAuthenticatedError(AuthError):
    """Operation requires an authenticated session but none is held."""

    pass


class LogoutError(SoracomError):
    """Remote logout call failed."""

    pass


# =============================================================================
# Network/Connection Errors (Transient)
# =============================================================================


class TransientError(SoracomError):
    """Base class for transient errors."""

    category = ErrorCategory.TRANSIENT


class RequestTimeoutError(TransientError):
    """Request exceeded the fixed request timeout."""

    pass


class ApiConnectionError(TransientError):
    """Connection-level failure (DNS, refused, reset)."""

    pass


# =============================================================================
# Permanent Errors
# =============================================================================


class PermanentError(SoracomError):
    """Base class for permanent errors."""

    category = ErrorCategory.PERMANENT


class ConfigurationError(PermanentError):
    """Server configuration is missing or invalid."""

    pass


class MissingCredentialsError(ConfigurationError):
    """Long-lived credentials (auth key id and secret) are not configured."""

    def __init__(
        self,
        message: str = "SORACOM credentials not configured",
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        super().__init__(message, cause, context)


# =============================================================================
# Classification Utilities
# =============================================================================


def classify_http_status(status_code: int) -> ErrorCategory:
    """Classify HTTP status code into error category."""
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code == 401:
        return ErrorCategory.AUTH

    if status_code == 429:
        return ErrorCategory.TRANSIENT

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


def is_auth_error(exc: Exception) -> bool:
    """Check if exception is an authorization failure that warrants re-authentication."""
    if isinstance(exc, SoracomError):
        return exc.category == ErrorCategory.AUTH
    return False


def is_transient_error(exc: Exception) -> bool:
    """Check if exception is transient."""
    if isinstance(exc, SoracomError):
        return exc.category == ErrorCategory.TRANSIENT
    return False


__all__ = [
    "ErrorCategory",
    "SoracomError",
    "AuthError",
    "AuthenticationError",
    "NotAuthenticatedError",
    "LogoutError",
    "TransientError",
    "RequestTimeoutError",
    "ApiConnectionError",
    "PermanentError",
    "ConfigurationError",
    "MissingCredentialsError",
    "classify_http_status",
    "is_auth_error",
    "is_transient_error",
]
