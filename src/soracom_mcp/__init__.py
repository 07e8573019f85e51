"""
SORACOM MCP server.

Exposes the SORACOM IoT SIM management API (SIMs, groups, billing, usage
stats, cell tower locations) as MCP tools over stdio.
"""

from importlib.metadata import PackageNotFoundError, version

SERVER_NAME = "soracom-mcp-server"

try:
    __version__ = version(SERVER_NAME)
except PackageNotFoundError:
    __version__ = "1.0.0"

__all__ = ["SERVER_NAME", "__version__"]
