"""Cell tower geolocation calls."""

from typing import Any

from soracom_mcp.client.transport import SoracomTransport


class CellLocationApi:
    def __init__(self, transport: SoracomTransport):
        self.transport = transport

    async def batch_get_cell_locations(
        self, identifiers: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Resolve up to many cell identifiers in one POST."""
        return await self.transport.post("/cell_locations", identifiers)
