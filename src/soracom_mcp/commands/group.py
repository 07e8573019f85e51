"""Group commands."""

from soracom_mcp.commands.base import BaseCommand, CommandContext, ToolResult
from soracom_mcp.commands.schemas import DEFAULT_LIMIT, GetGroupArgs, ListGroupsArgs


class ListGroupsCommand(BaseCommand):
    name = "Group_listGroups"
    description = "Return a list of groups"
    args_model = ListGroupsArgs

    async def run(self, args: ListGroupsArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        limit = args.limit if args.limit is not None else DEFAULT_LIMIT
        groups = await client.group.list_groups(
            {
                "tag_name": args.tag_name,
                "tag_value": args.tag_value,
                "tag_value_match_mode": args.tag_value_match_mode,
                "limit": limit,
                "last_evaluated_key": args.lastEvaluatedKey,
            }
        ) or []
        return self.format_list_response(
            groups,
            {"totalCount": len(groups), "hasMore": len(groups) == limit},
        )


class GetGroupCommand(BaseCommand):
    name = "Group_getGroup"
    description = "Get information about a specific group"
    args_model = GetGroupArgs

    async def run(self, args: GetGroupArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        return self.format_success(await client.group.get_group(args.group_id))
