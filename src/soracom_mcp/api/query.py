"""Query (search) resource calls."""

from typing import Any

from soracom_mcp.client.transport import SoracomTransport


class QueryApi:
    def __init__(self, transport: SoracomTransport):
        self.transport = transport

    async def search_sims(self, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return await self.transport.get("/query/sims", params)
