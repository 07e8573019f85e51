"""
Tool command registry.

Commands are looked up by tool name; listing is sorted by name.
"""

from soracom_mcp.commands.auth import LogoutCommand
from soracom_mcp.commands.base import BaseCommand, CommandContext, ToolResult
from soracom_mcp.commands.billing import (
    GetBillingCommand,
    GetBillingHistoryCommand,
    GetBillingSummaryOfBillItemsCommand,
    GetBillingSummaryOfSimsCommand,
    GetLatestBillingCommand,
)
from soracom_mcp.commands.cell_location import BatchGetCellLocationsCommand
from soracom_mcp.commands.group import GetGroupCommand, ListGroupsCommand
from soracom_mcp.commands.query import SearchSimsCommand
from soracom_mcp.commands.sim import (
    GetSimCommand,
    ListSimsCommand,
    ListSimSessionEventsCommand,
    ListSimStatusHistoryCommand,
)
from soracom_mcp.commands.stats import (
    GetAirStatsOfGroupCommand,
    GetAirStatsOfOperatorCommand,
    GetAirStatsOfSimCommand,
)

COMMANDS: dict[str, BaseCommand] = {
    command.name: command
    for command in (
        # Auth
        LogoutCommand(),
        # SIM
        ListSimsCommand(),
        GetSimCommand(),
        ListSimSessionEventsCommand(),
        ListSimStatusHistoryCommand(),
        # Query
        SearchSimsCommand(),
        # Stats
        GetAirStatsOfSimCommand(),
        GetAirStatsOfOperatorCommand(),
        GetAirStatsOfGroupCommand(),
        # Group
        ListGroupsCommand(),
        GetGroupCommand(),
        # Billing
        GetLatestBillingCommand(),
        GetBillingHistoryCommand(),
        GetBillingCommand(),
        GetBillingSummaryOfBillItemsCommand(),
        GetBillingSummaryOfSimsCommand(),
        # Cell location
        BatchGetCellLocationsCommand(),
    )
}


def get_command(name: str) -> BaseCommand | None:
    return COMMANDS.get(name)


def get_all_commands() -> list[BaseCommand]:
    return [COMMANDS[name] for name in sorted(COMMANDS)]


__all__ = [
    "COMMANDS",
    "BaseCommand",
    "CommandContext",
    "ToolResult",
    "get_all_commands",
    "get_command",
]
