"""Cell tower geolocation command."""

from soracom_mcp.commands.base import BaseCommand, CommandContext, ToolResult
from soracom_mcp.commands.schemas import BatchGetCellLocationsArgs


class BatchGetCellLocationsCommand(BaseCommand):
    name = "CellLocation_batchGetCellLocations"
    description = (
        "Get location information for multiple cell towers in batch. For 3G networks, "
        "specify MCC, MNC, LAC, and CID. For 4G/LTE networks, specify MCC, MNC, TAC, and "
        "ECID. Uses OpenCelliD Project database."
    )
    args_model = BatchGetCellLocationsArgs

    async def run(self, args: BatchGetCellLocationsArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        identifiers = [
            cell.model_dump(exclude_none=True) for cell in args.cellIdentifiers
        ]
        locations = await client.cell_location.batch_get_cell_locations(identifiers) or []
        return self.format_success(
            locations,
            {"totalCount": len(locations), "requestCount": len(identifiers)},
        )
