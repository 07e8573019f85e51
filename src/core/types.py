"""
Core types shared across modules.

This module provides base enums used by the error hierarchy and the API
transport to classify failures consistently.
"""

from enum import Enum


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may succeed later
                   (e.g., network timeouts, 429/503 errors)
        AUTH: Authentication failures requiring credential refresh
              (e.g., 401 errors, expired or revoked session tokens)
        PERMANENT: Failures that won't succeed on retry
                   (e.g., 404, validation errors, configuration issues)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


__all__ = [
    "ErrorCategory",
]
