"""SIM resource calls."""

from typing import Any

from soracom_mcp.client.transport import SoracomTransport, encode_path_segment


class SimApi:
    def __init__(self, transport: SoracomTransport):
        self.transport = transport

    async def get_sim(self, sim_id: str) -> dict[str, Any]:
        return await self.transport.get(f"/sims/{encode_path_segment(sim_id)}")

    async def list_sims(self, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return await self.transport.get("/sims", params)

    async def list_sim_session_events(
        self, sim_id: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        return await self.transport.get(
            f"/sims/{encode_path_segment(sim_id)}/events/sessions", params
        )

    async def list_sim_status_history(
        self, sim_id: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        return await self.transport.get(
            f"/sims/{encode_path_segment(sim_id)}/statuses/history", params
        )
