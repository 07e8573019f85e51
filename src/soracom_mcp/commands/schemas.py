"""
Argument models for the tool commands.

Each tool's declared input schema is generated from its model
(``model_json_schema(by_alias=True)``), so the field descriptions below are
what the MCP host sees. Field names match the wire names the host sends;
``from`` is a Python keyword and is mapped through an alias.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LIMIT = 10
MAX_GROUP_LIST_LIMIT = 100
MAX_SIM_SEARCH_LIMIT = 100

FROM_SECONDS_DESCRIPTION = (
    "Start date in UNIX timestamp (seconds). day: subtract up to 604800 seconds (7 days). "
    "month: subtract up to 7776000 seconds (3 months)."
)
TO_SECONDS_DESCRIPTION = "End date in UNIX timestamp (seconds). Use the current timestamp."
PERIOD_DESCRIPTION = (
    'Unit of aggregation. Recommended: start with "month" for broader overview. '
    "day: Daily data (recent days), month: Monthly data (recent months)"
)


class CommandArgs(BaseModel):
    """Base for argument models; accepts field names and aliases."""

    model_config = ConfigDict(populate_by_name=True)


class NoArgs(CommandArgs):
    pass


# =============================================================================
# SIM
# =============================================================================


class ListSimsArgs(CommandArgs):
    limit: int | None = Field(
        default=None, description="Maximum number of SIMs to return (default: 10)"
    )
    lastEvaluatedKey: str | None = Field(
        default=None,
        description=(
            "The ID of the last SIM retrieved on the previous page. "
            "Specify this to continue from the next SIM onward"
        ),
    )


class GetSimArgs(CommandArgs):
    sim_id: str = Field(..., description="SIM ID of the target SIM")


class ListSimHistoryArgs(CommandArgs):
    """Shared by session events and status history (times in UNIX milliseconds)."""

    sim_id: str = Field(..., description="SIM ID of the target SIM")
    from_: int | None = Field(
        default=None,
        alias="from",
        description="Start time (UNIX time in milliseconds) of the period to retrieve",
    )
    to: int | None = Field(
        default=None,
        description="End time (UNIX time in milliseconds) of the period to retrieve",
    )
    limit: int | None = Field(
        default=None, description="Maximum number of entries to retrieve (default: 10)"
    )
    last_evaluated_key: str | None = Field(
        default=None,
        description="Pagination key of the last entry retrieved on the previous page",
    )


# =============================================================================
# Query
# =============================================================================


class SearchSimsArgs(CommandArgs):
    searchTerm: str | None = Field(
        default=None,
        description=(
            "Use this when you don't know which specific field to search. Searches across "
            "name, group, imsi, msisdn, iccid, serial_number, sim_id, and tag simultaneously"
        ),
    )
    name: str | None = Field(default=None, description="Search by SIM name")
    group: str | None = Field(default=None, description="Search by group name")
    group_id: str | None = Field(default=None, description="Search by group ID")
    sim_id: str | None = Field(default=None, description="Search by SIM ID")
    imsi: str | None = Field(default=None, description="Search by IMSI")
    msisdn: str | None = Field(default=None, description="Search by MSISDN")
    iccid: str | None = Field(default=None, description="Search by ICCID")
    serial_number: str | None = Field(default=None, description="Search by serial number")
    tag: str | None = Field(default=None, description="Search by tag values")
    status: str | None = Field(default=None, description="Filter by SIM status")
    session_status: Literal["NA", "ONLINE", "OFFLINE"] | None = Field(
        default=None, description="Filter by session status"
    )
    subscription: str | None = Field(default=None, description="Filter by subscription plan")
    module_type: str | None = Field(default=None, description="Filter by module type")
    bundles: str | None = Field(default=None, description="Filter by bundles type")
    search_type: Literal["and", "or"] | None = Field(
        default=None,
        description=(
            'Search condition type. Defaults to "and" for multiple specific fields, '
            '"or" for searchTerm'
        ),
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        le=MAX_SIM_SEARCH_LIMIT,
        description="Maximum number of SIMs to return (default: 10)",
    )
    last_evaluated_key: str | None = Field(
        default=None, description="Pagination key from previous response"
    )


# =============================================================================
# Stats
# =============================================================================


class OperatorAirStatsArgs(CommandArgs):
    from_: int = Field(..., alias="from", description=FROM_SECONDS_DESCRIPTION)
    to: int = Field(..., description=TO_SECONDS_DESCRIPTION)
    period: Literal["day", "month"] = Field(..., description=PERIOD_DESCRIPTION)


class SimAirStatsArgs(CommandArgs):
    sim_id: str = Field(..., description="SIM ID of the target SIM")
    from_: int = Field(
        ...,
        alias="from",
        description=(
            "Start date in UNIX timestamp (seconds). minutes: subtract up to 2764800 seconds "
            "(32 days). day/month: subtract up to 46656000 seconds (18 months)."
        ),
    )
    to: int = Field(..., description=TO_SECONDS_DESCRIPTION)
    period: Literal["minutes", "day", "month"] = Field(
        ...,
        description=(
            'Unit of aggregation. Recommended: start with "month" for broader overview. '
            "minutes: Minute-level data (recent hours), day: Daily data, month: Monthly data"
        ),
    )


class GroupAirStatsArgs(CommandArgs):
    group_id: str = Field(..., min_length=1, description="The Group ID")
    from_: int = Field(..., alias="from", gt=0, description=FROM_SECONDS_DESCRIPTION)
    to: int = Field(..., gt=0, description=TO_SECONDS_DESCRIPTION)
    period: Literal["day", "month"] = Field(..., description=PERIOD_DESCRIPTION)


# =============================================================================
# Group
# =============================================================================


class ListGroupsArgs(CommandArgs):
    tag_name: str | None = Field(
        default=None,
        description=(
            "Tag name of the group. Filters through all groups that exactly match the tag "
            "name. When tag_name is specified, tag_value is required"
        ),
    )
    tag_value: str | None = Field(default=None, description="Tag value of the groups")
    tag_value_match_mode: Literal["exact", "prefix"] | None = Field(
        default=None,
        description="Search criteria for tag strings (exact or prefix, default: exact)",
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        le=MAX_GROUP_LIST_LIMIT,
        description="Maximum number of results per response page (default: 10)",
    )
    lastEvaluatedKey: str | None = Field(
        default=None,
        description=(
            "The last Group ID retrieved on the current page. "
            "Specify this to continue from the next group onward"
        ),
    )


class GetGroupArgs(CommandArgs):
    group_id: str = Field(..., min_length=1, description="ID of the target Group")


# =============================================================================
# Billing
# =============================================================================


class GetBillingArgs(CommandArgs):
    yearMonth: str = Field(
        ..., pattern=r"^\d{6}$", description="Billing year-month (YYYYMM format)"
    )


# =============================================================================
# Cell location
# =============================================================================


class CellIdentifier(CommandArgs):
    mcc: str = Field(..., min_length=1, description="Mobile Country Code (required)")
    mnc: str = Field(..., min_length=1, description="Mobile Network Code (required)")
    lac: str | None = Field(default=None, description="Location Area Code (for 3G networks)")
    cid: str | None = Field(default=None, description="Cell ID (for 3G networks)")
    tac: str | None = Field(default=None, description="Tracking Area Code (for 4G/LTE networks)")
    ecid: str | None = Field(default=None, description="Enhanced Cell ID (for 4G/LTE networks)")
    eci: str | None = Field(default=None, description="Enhanced Cell ID alternative (same as ecid)")
    identifier: str | None = Field(
        default=None, description="Optional identifier to link request to response"
    )


class BatchGetCellLocationsArgs(CommandArgs):
    cellIdentifiers: list[CellIdentifier] = Field(
        ...,
        min_length=1,
        description="Array of cell identifiers to get location information for",
    )
