"""Session commands."""

from soracom_mcp.commands.base import BaseCommand, CommandContext, ToolResult
from soracom_mcp.commands.schemas import NoArgs


class LogoutCommand(BaseCommand):
    name = "Auth_logout"
    description = "Clear cached authentication tokens"
    args_model = NoArgs

    async def run(self, args: NoArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        await client.logout()
        return self.format_success(
            {
                "message": (
                    "Authentication cache cleared. The system will automatically "
                    "re-authenticate on the next API call."
                ),
                "note": "You can continue to use all SORACOM API functions normally.",
            }
        )
