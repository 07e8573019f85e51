"""Group resource calls."""

from typing import Any

from soracom_mcp.client.transport import SoracomTransport, encode_path_segment


class GroupApi:
    def __init__(self, transport: SoracomTransport):
        self.transport = transport

    async def get_group(self, group_id: str) -> dict[str, Any]:
        return await self.transport.get(f"/groups/{encode_path_segment(group_id)}")

    async def list_groups(self, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return await self.transport.get("/groups", params)
