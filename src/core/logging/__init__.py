"""
Structured logging module.

Provides JSON and console logging with per-invocation context propagation.
"""

from core.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from core.logging.context_managers import LogContext
from core.logging.formatters import ConsoleFormatter, JSONFormatter
from core.logging.setup import (
    get_log_file_path,
    get_logger,
    parse_log_level,
    setup_logging,
)

__all__ = [
    # Setup
    "setup_logging",
    "get_logger",
    "get_log_file_path",
    "parse_log_level",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    # Context Managers
    "LogContext",
]
