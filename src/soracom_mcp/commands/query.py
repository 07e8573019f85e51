"""SIM search command."""

from typing import Any

from soracom_mcp.commands.base import BaseCommand, CommandContext, ToolResult
from soracom_mcp.commands.schemas import DEFAULT_LIMIT, SearchSimsArgs

# Fields searched when only a free-text searchTerm is given
SEARCH_TERM_FIELDS = (
    "name",
    "group",
    "imsi",
    "msisdn",
    "iccid",
    "serial_number",
    "sim_id",
    "tag",
)

SPECIFIC_FIELDS = (
    "name",
    "group",
    "group_id",
    "sim_id",
    "imsi",
    "msisdn",
    "iccid",
    "serial_number",
    "tag",
    "status",
    "session_status",
    "subscription",
    "module_type",
    "bundles",
)


def build_search_params(args: SearchSimsArgs) -> dict[str, Any]:
    """
    Translate tool arguments to /query/sims parameters.

    A lone searchTerm is fanned out over SEARCH_TERM_FIELDS with OR logic.
    Otherwise the specific fields are sent as given, and more than one of
    them defaults to AND logic. An explicit search_type always wins.
    """
    specific = {f: getattr(args, f) for f in SPECIFIC_FIELDS if getattr(args, f)}
    params: dict[str, Any] = {}

    if args.searchTerm and not specific:
        params = {f: args.searchTerm for f in SEARCH_TERM_FIELDS}
        params["search_type"] = "or"
    else:
        params.update(specific)

    if args.search_type:
        params["search_type"] = args.search_type
    elif len(specific) > 1:
        params["search_type"] = "and"

    params["limit"] = args.limit if args.limit is not None else DEFAULT_LIMIT
    if args.last_evaluated_key:
        params["last_evaluated_key"] = args.last_evaluated_key

    return params


class SearchSimsCommand(BaseCommand):
    name = "Query_searchSims"
    description = (
        "Search for IoT SIM cards using flexible criteria. Use \"searchTerm\" for general "
        "search across all fields (name, ICCID, IMSI, etc.) or use specific field parameters "
        "for targeted search. Supports AND/OR logic. Examples: "
        '{"searchTerm": "tokyo", "limit": 100} searches all fields, '
        '{"status": "active", "subscription": "plan-D"} finds active SIMs with specific plan'
    )
    args_model = SearchSimsArgs

    async def run(self, args: SearchSimsArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        params = build_search_params(args)
        sims = await client.query.search_sims(params) or []

        return self.format_success(
            sims,
            {
                "totalCount": len(sims),
                "hasMore": len(sims) == params["limit"],
                "searchType": params.get("search_type", "and"),
                "searchParams": params,
            },
        )
