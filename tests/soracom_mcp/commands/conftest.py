"""Shared fixtures for tool command tests."""

import json

import pytest

from config.config import ServerConfig
from soracom_mcp.client.models import Coverage
from soracom_mcp.commands import CommandContext


@pytest.fixture
def server_config() -> ServerConfig:
    return ServerConfig(auth_key_id="K1", auth_key="S1", coverage=Coverage.JP)


@pytest.fixture
def context(server_config, registry) -> CommandContext:
    return CommandContext(config=server_config, registry=registry)


@pytest.fixture
def envelope():
    """Parse a successful ToolResult into its JSON payload."""

    def _parse(result):
        assert not result.is_error, result.text
        return json.loads(result.text)

    return _parse
