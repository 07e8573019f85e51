"""SORACOM MCP server entry point. Use --help for usage."""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

from config.config import ServerConfig, load_config
from core.errors.exceptions import ConfigurationError
from core.logging.setup import setup_logging
from soracom_mcp import SERVER_NAME, __version__
from soracom_mcp.client.models import Coverage
from soracom_mcp.server import run_server

# Placeholder logger until setup_logging() is called in main()
logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME,
        description="Expose the SORACOM IoT SIM API as MCP tools over stdio.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config (default: $SORACOM_MCP_CONFIG or config/config.yaml)",
    )
    parser.add_argument(
        "--coverage",
        choices=["jp", "g"],
        help="Default coverage type (overrides SORACOM_COVERAGE_TYPE)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARN", "ERROR"],
        help="Log level (overrides SORACOM_LOG_LEVEL)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def setup_signal_handlers(loop: asyncio.AbstractEventLoop, task: asyncio.Task) -> None:
    """Cancel the server task on SIGINT/SIGTERM so shutdown cleanup runs.

    Signal handlers are not supported on Windows; KeyboardInterrupt is used instead.
    """

    def handle_signal(sig: signal.Signals) -> None:
        logger.info("Received signal, initiating graceful shutdown", extra={"error": sig.name})
        task.cancel()

    if sys.platform == "win32":
        return

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: handle_signal(s))


async def _serve(config: ServerConfig) -> None:
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    if task is not None:
        setup_signal_handlers(loop, task)
    try:
        await run_server(config)
    except asyncio.CancelledError:
        logger.info("Server stopped")


def main(argv: list[str] | None = None) -> int:
    load_dotenv(Path.cwd() / ".env")
    args = parse_args(argv)

    try:
        config = load_config(config_path=args.config)
    except ConfigurationError as e:
        setup_logging("ERROR")
        logger.error("Failed to start server", extra={"error_message": str(e)})
        return 1

    if args.coverage:
        config.coverage = Coverage.parse(args.coverage)
    if args.log_level:
        config.log_level = args.log_level

    setup_logging(config.log_level, log_dir=config.log_dir, json_format=config.log_json)

    try:
        asyncio.run(_serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
