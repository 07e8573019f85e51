"""Billing commands. Amounts are passed through as returned by the API."""

from soracom_mcp.commands.base import BaseCommand, CommandContext, ToolResult
from soracom_mcp.commands.schemas import GetBillingArgs, NoArgs


class GetLatestBillingCommand(BaseCommand):
    name = "Billing_getLatestBilling"
    description = "Retrieves the preliminary usage fee for the current month"
    args_model = NoArgs

    async def run(self, args: NoArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        return self.format_success(await client.billing.get_latest_billing())


class GetBillingHistoryCommand(BaseCommand):
    name = "Billing_getBillingHistory"
    description = "List all available finalized billing periods from the last 18 months."
    args_model = NoArgs

    async def run(self, args: NoArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        return self.format_success(await client.billing.get_billing_history())


class GetBillingCommand(BaseCommand):
    name = "Billing_getBilling"
    description = (
        "Gets a finalized past billing history for the specified month. Returns complete "
        "billing details including charges by service type."
    )
    args_model = GetBillingArgs

    async def run(self, args: GetBillingArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        billing = await client.billing.get_billing(args.yearMonth)
        return self.format_success(
            {
                "yearMonth": args.yearMonth,
                "billing": billing,
                "message": "Billing data retrieved successfully",
            }
        )


class GetBillingSummaryOfBillItemsCommand(BaseCommand):
    name = "Billing_getBillingSummaryOfBillItems"
    description = (
        "Get a billing summary of bill items for the last 4 months (this month to 3 months "
        "ago). Shows charges categorized by services."
    )
    args_model = NoArgs

    async def run(self, args: NoArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        return self.format_list_response(await client.billing.get_billing_summary_of_bill_items())


class GetBillingSummaryOfSimsCommand(BaseCommand):
    name = "Billing_getBillingSummaryOfSims"
    description = (
        "Get a billing summary of SIMs for the last 4 months (current month to 3 months ago). "
        "The list is sorted by amount in descending order and includes up to 100 items."
    )
    args_model = NoArgs

    async def run(self, args: NoArgs, context: CommandContext) -> ToolResult:
        client = await self.get_authenticated_client(context)
        return self.format_list_response(await client.billing.get_billing_summary_of_sims())
