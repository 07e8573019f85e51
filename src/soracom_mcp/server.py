"""
MCP server binding.

Wires the tool commands to the MCP low-level server over stdio. The server
owns one TokenCache and one ClientRegistry for the life of the process and
tears them down on exit.
"""

import logging
import uuid
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from config.config import ServerConfig
from core.auth.token_cache import TokenCache
from core.errors.exceptions import SoracomError
from core.logging.context_managers import LogContext
from soracom_mcp import SERVER_NAME, __version__
from soracom_mcp.client.models import Coverage
from soracom_mcp.client.registry import ClientRegistry
from soracom_mcp.commands import CommandContext, get_all_commands, get_command

logger = logging.getLogger(__name__)

COVERAGE_PROPERTY = {
    "type": "string",
    "enum": [c.value for c in Coverage],
    "description": 'API coverage area: "jp" (Japan) or "g" (Global). '
    "Defaults to the server's configured coverage.",
}


class ToolCallError(SoracomError):
    """Tool invocation failed; surfaced to the host as an error result."""


def tool_definitions() -> list[types.Tool]:
    """Every command's schema with the optional ``coverage`` property, sorted by name."""
    tools = []
    for command in get_all_commands():
        schema = command.input_schema
        schema["properties"] = {**schema.get("properties", {}), "coverage": COVERAGE_PROPERTY}
        tools.append(
            types.Tool(name=command.name, description=command.description, inputSchema=schema)
        )
    return tools


async def dispatch_tool(
    name: str,
    arguments: dict[str, Any] | None,
    config: ServerConfig,
    registry: ClientRegistry,
) -> str:
    """
    Run one tool invocation and return its text envelope.

    Raises:
        ToolCallError: Unknown tool, invalid coverage, or an error envelope
    """
    command = get_command(name)
    if command is None:
        raise ToolCallError(f"Unknown tool: {name}")

    args = dict(arguments or {})
    try:
        coverage = Coverage.parse(args.pop("coverage", None), default=config.coverage)
    except ValueError as e:
        raise ToolCallError(str(e)) from e

    context = CommandContext(config=config, registry=registry, coverage=coverage)

    with LogContext(tool_name=name, request_id=uuid.uuid4().hex[:12], coverage=coverage.value):
        logger.debug("Executing tool", extra={"arguments": sorted(args)})
        result = await command.execute(args, context)

    if result.is_error:
        raise ToolCallError(result.text)
    return result.text


def create_server(config: ServerConfig, registry: ClientRegistry) -> Server:
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return tool_definitions()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        text = await dispatch_tool(name, arguments, config, registry)
        return [types.TextContent(type="text", text=text)]

    return server


async def shutdown(registry: ClientRegistry, token_cache: TokenCache) -> None:
    """Dispose every client, then drop all cached tokens."""
    logger.info("Shutting down", extra={"count": len(registry)})
    await registry.dispose_all()
    token_cache.clear()


async def run_server(config: ServerConfig) -> None:
    """Serve MCP over stdio until stdin closes or the task is cancelled."""
    token_cache = TokenCache()
    registry = ClientRegistry(
        token_cache,
        endpoints=config.endpoints,
        timeout_seconds=config.request_timeout_seconds,
    )
    server = create_server(config, registry)

    logger.info(
        "SORACOM MCP server starting",
        extra={"coverage": config.coverage.value, "count": len(get_all_commands())},
    )

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await shutdown(registry, token_cache)


__all__ = [
    "ToolCallError",
    "create_server",
    "dispatch_tool",
    "run_server",
    "shutdown",
    "tool_definitions",
]
