"""
Resource capability sets.

Each class wraps the shared transport of one registry entry and performs
exactly one HTTP call per operation. Parameters are passed through as-is.
"""

from soracom_mcp.api.billing import BillingApi
from soracom_mcp.api.cell_location import CellLocationApi
from soracom_mcp.api.group import GroupApi
from soracom_mcp.api.query import QueryApi
from soracom_mcp.api.sim import SimApi
from soracom_mcp.api.stats import StatsApi

__all__ = [
    "BillingApi",
    "CellLocationApi",
    "GroupApi",
    "QueryApi",
    "SimApi",
    "StatsApi",
]
