"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- SoracomError hierarchy for typed exceptions
- Classification utilities for error handling
"""

from core.errors.exceptions import (
    ApiConnectionError,
    AuthenticationError,
    AuthError,
    ConfigurationError,
    # Enums
    ErrorCategory,
    LogoutError,
    MissingCredentialsError,
    NotAuthenticatedError,
    PermanentError,
    RequestTimeoutError,
    # Base classes
    SoracomError,
    TransientError,
    # Classification utilities
    classify_http_status,
    is_auth_error,
    is_transient_error,
)

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "SoracomError",
    "AuthError",
    "TransientError",
    "PermanentError",
    # Auth errors
    "AuthenticationError",
    "NotAuthenticatedError",
    "LogoutError",
    # Transient errors
    "RequestTimeoutError",
    "ApiConnectionError",
    # Permanent errors
    "ConfigurationError",
    "MissingCredentialsError",
    # Classification utilities
    "classify_http_status",
    "is_auth_error",
    "is_transient_error",
]
