"""SIM commands."""

from typing import Any

from soracom_mcp.commands.base import BaseCommand, CommandContext, ToolResult
from soracom_mcp.commands.schemas import (
    DEFAULT_LIMIT,
    GetSimArgs,
    ListSimHistoryArgs,
    ListSimsArgs,
)


def _history_params(args: ListSimHistoryArgs) -> dict[str, Any]:
    return {
        "from": args.from_,
        "to": args.to,
        "limit": args.limit if args.limit is not None else DEFAULT_LIMIT,
        "last_evaluated_key": args.last_evaluated_key,
    }


class ListSimsCommand(BaseCommand):
    name = "Sim_listSims"
    description = (
        "List all IoT SIM cards in your account. Returns paginated results with SIM details"
    )
    args_model = ListSimsArgs

    async def run(self, args: ListSimsArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        sims = await client.sim.list_sims(
            {
                "limit": args.limit if args.limit is not None else DEFAULT_LIMIT,
                "last_evaluated_key": args.lastEvaluatedKey,
            }
        )
        return self.format_list_response(sims)


class GetSimCommand(BaseCommand):
    name = "Sim_getSim"
    description = "Get detailed information about a specific IoT SIM"
    args_model = GetSimArgs

    async def run(self, args: GetSimArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        return self.format_success(await client.sim.get_sim(args.sim_id))


class ListSimSessionEventsCommand(BaseCommand):
    name = "Sim_listSimSessionEvents"
    description = "Retrieve session event history for a specific SIM"
    args_model = ListSimHistoryArgs

    async def run(self, args: ListSimHistoryArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        events = await client.sim.list_sim_session_events(args.sim_id, _history_params(args))
        return self.format_list_response(events)


class ListSimStatusHistoryCommand(BaseCommand):
    name = "Sim_listSimStatusHistory"
    description = "Get the status history for the specified SIM"
    args_model = ListSimHistoryArgs

    async def run(self, args: ListSimHistoryArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        history = await client.sim.list_sim_status_history(args.sim_id, _history_params(args))
        return self.format_list_response(history)
