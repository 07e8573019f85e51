"""Air (data usage) statistics calls."""

from collections.abc import Callable
from typing import Any

from core.errors.exceptions import NotAuthenticatedError
from soracom_mcp.client.transport import SoracomTransport, encode_path_segment


def _stats_params(from_epoch: int, to_epoch: int, period: str) -> dict[str, Any]:
    return {"from": from_epoch, "to": to_epoch, "period": period}


class StatsApi:
    """
    Args:
        transport: Shared transport of the owning entry
        operator_id: Callable returning the entry's current operator id
    """

    def __init__(self, transport: SoracomTransport, operator_id: Callable[[], str | None]):
        self.transport = transport
        self._operator_id = operator_id

    async def get_air_stats_of_operator(
        self, from_epoch: int, to_epoch: int, period: str
    ) -> Any:
        operator_id = self._operator_id()
        if not operator_id:
            raise NotAuthenticatedError("Not authenticated. Operator ID is required.")
        return await self.transport.get(
            f"/stats/air/operators/{encode_path_segment(operator_id)}",
            _stats_params(from_epoch, to_epoch, period),
        )

    async def get_air_stats_of_sim(
        self, sim_id: str, from_epoch: int, to_epoch: int, period: str
    ) -> Any:
        return await self.transport.get(
            f"/stats/air/sims/{encode_path_segment(sim_id)}",
            _stats_params(from_epoch, to_epoch, period),
        )

    async def get_air_stats_of_group(
        self, group_id: str, from_epoch: int, to_epoch: int, period: str
    ) -> Any:
        return await self.transport.get(
            f"/stats/air/groups/{encode_path_segment(group_id)}",
            _stats_params(from_epoch, to_epoch, period),
        )
