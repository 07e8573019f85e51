"""
Core library: Reusable, infrastructure-agnostic components.

Modules:
    auth        - Token cache with expiry buffer and credential identity
    logging     - Structured JSON/console logging with invocation context
    errors      - Error classification and exception hierarchy
    utils       - JSON serialization helpers

Design Principles:
    - No dependency on the SORACOM API surface
    - All modules are independently testable
    - Type hints throughout
"""

from .types import ErrorCategory

__all__ = [
    "ErrorCategory",
]
