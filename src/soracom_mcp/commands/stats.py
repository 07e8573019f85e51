"""Air usage statistics commands."""

from soracom_mcp.commands.base import BaseCommand, CommandContext, ToolResult
from soracom_mcp.commands.schemas import (
    GroupAirStatsArgs,
    OperatorAirStatsArgs,
    SimAirStatsArgs,
)


class GetAirStatsOfSimCommand(BaseCommand):
    name = "Stats_getAirStatsOfSim"
    description = "Retrieve the usage report for the subscriber specified by the SIM ID"
    args_model = SimAirStatsArgs

    async def run(self, args: SimAirStatsArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        stats = await client.stats.get_air_stats_of_sim(
            args.sim_id, args.from_, args.to, args.period
        )
        return self.format_success(stats)


class GetAirStatsOfOperatorCommand(BaseCommand):
    name = "Stats_getAirStatsOfOperator"
    description = "Get data usage statistics for Air service"
    args_model = OperatorAirStatsArgs

    async def run(self, args: OperatorAirStatsArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        stats = await client.stats.get_air_stats_of_operator(args.from_, args.to, args.period)
        return self.format_success(stats)


class GetAirStatsOfGroupCommand(BaseCommand):
    name = "Stats_getAirStatsOfGroup"
    description = "Retrieves the usage report for the specified group"
    args_model = GroupAirStatsArgs

    async def run(self, args: GroupAirStatsArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        stats = await client.stats.get_air_stats_of_group(
            args.group_id, args.from_, args.to, args.period
        )
        return self.format_success(stats)
