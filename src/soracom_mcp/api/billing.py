"""Billing resource calls. Billing values are returned uninterpreted."""

from typing import Any

from soracom_mcp.client.transport import SoracomTransport, encode_path_segment


class BillingApi:
    def __init__(self, transport: SoracomTransport):
        self.transport = transport

    async def get_billing_history(self) -> list[dict[str, Any]] | dict[str, Any]:
        return await self.transport.get("/bills")

    async def get_billing(self, year_month: str) -> dict[str, Any]:
        """Detailed bill for one month (``yyyyMM``)."""
        return await self.transport.get(f"/bills/{encode_path_segment(year_month)}")

    async def get_billing_summary_of_bill_items(self) -> list[dict[str, Any]]:
        return await self.transport.get("/bills/summaries/bill_items")

    async def get_billing_summary_of_sims(self) -> list[dict[str, Any]]:
        return await self.transport.get("/bills/summaries/sims")

    async def get_latest_billing(self) -> dict[str, Any]:
        return await self.transport.get("/bills/latest")
