"""Logging setup and configuration."""

import logging
import sys
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TextIO

from core.logging.formatters import ConsoleFormatter, JSONFormatter

# Default settings
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_ROTATION_WHEN = "midnight"
DEFAULT_BACKUP_COUNT = 7

# Accepted level names, including the WARN spelling used by SORACOM tooling
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

# Noisy loggers to suppress
NOISY_LOGGERS = [
    "aiohttp",
    "aiohttp.access",
    "asyncio",
    "mcp",
    "mcp.server.lowlevel.server",
]


def parse_log_level(name: str | int | None) -> int:
    """Translate a level name (DEBUG/INFO/WARN/ERROR) to a logging level."""
    if name is None or name == "":
        return DEFAULT_LOG_LEVEL
    if isinstance(name, int):
        return name
    level = LOG_LEVELS.get(name.strip().upper())
    if level is None:
        raise ValueError(f"Unknown log level: {name!r}. Expected one of {sorted(LOG_LEVELS)}")
    return level


def get_log_file_path(log_dir: Path, name: str = "soracom-mcp") -> Path:
    """
    Build the log file path: {log_dir}/{YYYY-MM-DD}/{name}_{MMDD_HHMM}.log
    """
    now = datetime.now()
    return log_dir / now.strftime("%Y-%m-%d") / f"{name}_{now.strftime('%m%d_%H%M')}.log"


def setup_logging(
    level: str | int | None = DEFAULT_LOG_LEVEL,
    log_dir: Path | None = None,
    json_format: bool = True,
    suppress_noisy: bool = True,
    stream: TextIO | None = None,
    rotation_when: str = DEFAULT_ROTATION_WHEN,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """
    Configure root logging for the server process.

    The console handler always writes to stderr: stdout carries the MCP
    JSON-RPC stream and must never receive log output.

    Args:
        level: Level name or number for all handlers (default: INFO)
        log_dir: Directory for rotating log files. No file handler when None.
        json_format: Use JSON format for file logs (default: True)
        suppress_noisy: Raise third-party HTTP/protocol loggers to WARNING
        stream: Console stream override (default: sys.stderr)
        rotation_when: TimedRotatingFileHandler ``when`` value
        backup_count: Number of rotated files to keep

    Returns:
        Configured root logger
    """
    log_level = parse_log_level(level)

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(ConsoleFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_file = get_log_file_path(Path(log_dir))
        log_file.parent.mkdir(parents=True, exist_ok=True)

        if json_format:
            file_formatter: logging.Formatter = JSONFormatter()
        else:
            file_formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
            )

        file_handler = TimedRotatingFileHandler(
            log_file,
            when=rotation_when,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    if suppress_noisy:
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.debug("Logging configured", extra={"count": len(root_logger.handlers)})
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
