# Copyright 2025 The PlainSignal MCP Authors. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tools for running PlainSignal analytics reports."""

from typing import Annotated, List, Optional
import logging

import httpx
from pydantic import Field

from plainsignal_mcp.config import Settings
from plainsignal_mcp.coordinator import mcp
from plainsignal_mcp.errors import (
    ErrorKind,
    Failure,
    InvalidFilterKeyError,
    ReportError,
    Result,
    unwrap,
)
from plainsignal_mcp.tools.reporting.filters import (
    get_filter_hints,
    get_sub_report_type_hints,
)
from plainsignal_mcp.tools.reporting.models import (
    MAX_SUB_REPORT_TYPE,
    MIN_SUB_REPORT_TYPE,
    AggregationWindow,
    FilterSpec,
    Pagination,
    PeriodSelection,
    ReportQuery,
)
from plainsignal_mcp.tools.reporting.query import construct_report_path
from plainsignal_mcp.tools.utils import fetch_json_text, get_settings

logger = logging.getLogger(__name__)

_PERIOD_SELECTION_DESCRIPTION = (
    "If user wants a complete month of data like April's data then the "
    "value should be m, else if the user wants to see a whole year's data "
    "then the value should be y else the value should be d. The available "
    "values are d, m and y where Month: m, Year: y, Day: d."
)
_AGGREGATION_WINDOW_DESCRIPTION = (
    "Data aggregation window. Use h for single day report or anything less "
    "than or equal to 1 day, for anything else use daily aggregation. "
    "Acceptable values, Day: d, Hour: h"
)
_FILTERS_DESCRIPTION = (
    "List of filters, each a dictionary of key and values. Example filter: "
    '{"key": "segment_country", "values": ["US", "CA"]}'
)


async def fetch_report(
    settings: Settings,
    organization_id: str,
    domain_id: str,
    query: ReportQuery,
    client: Optional[httpx.AsyncClient] = None,
) -> Result:
    """Builds the API path for `query` and fetches it.

    An unknown filter key fails with an invalid-parameter error before any
    request is sent.
    """
    try:
        path = construct_report_path(organization_id, domain_id, query)
    except InvalidFilterKeyError as e:
        logger.error("Error fetching report: %s", e)
        return Failure(ReportError(ErrorKind.INVALID_PARAMETER, str(e)))
    return await fetch_json_text(settings, path, client)


def _get_report_description() -> str:
    """Returns the description for the `getReport` tool."""
    return f"""
          {get_report.__doc__}

          ## Hints for arguments

          ### Hints for `filters`:
          {get_filter_hints()}
          """


def _get_sub_report_description() -> str:
    """Returns the description for the `getSubReport` tool."""
    return f"""
          {get_sub_report.__doc__}

          ## Hints for arguments

          ### Hints for `subReportType`:
          {get_sub_report_type_hints()}

          ### Hints for `filters`:
          {get_filter_hints()}
          """


async def get_report(
    organizationID: Annotated[str, Field(description="Organization ID")],
    domainID: Annotated[str, Field(description="Domain ID")],
    periodFrom: Annotated[
        str, Field(description="Report start datetime in RFC3339 format")
    ],
    periodTo: Annotated[
        str, Field(description="Report end datetime in RFC3339 format")
    ],
    periodSelection: Annotated[
        PeriodSelection, Field(description=_PERIOD_SELECTION_DESCRIPTION)
    ],
    aggregationWindow: Annotated[
        AggregationWindow, Field(description=_AGGREGATION_WINDOW_DESCRIPTION)
    ],
    filters: Annotated[
        Optional[List[FilterSpec]], Field(description=_FILTERS_DESCRIPTION)
    ] = None,
) -> str:
    """Get an analytics report.

    Returns the PlainSignal analytics report for a domain over the given
    period as JSON, unchanged.
    """
    query = ReportQuery(
        period_from=periodFrom,
        period_to=periodTo,
        period_selection=periodSelection,
        aggregation_window=aggregationWindow,
        filters=tuple(filters or ()),
    )
    return unwrap(
        await fetch_report(get_settings(), organizationID, domainID, query)
    )


async def get_sub_report(
    organizationID: Annotated[str, Field(description="Organization ID")],
    domainID: Annotated[str, Field(description="Domain ID")],
    periodFrom: Annotated[
        str,
        Field(description="Report start datetime as an RFC3339 timestamp"),
    ],
    periodTo: Annotated[
        str,
        Field(description="Report end datetime as an RFC3339 timestamp"),
    ],
    periodSelection: Annotated[
        PeriodSelection, Field(description=_PERIOD_SELECTION_DESCRIPTION)
    ],
    aggregationWindow: Annotated[
        AggregationWindow, Field(description=_AGGREGATION_WINDOW_DESCRIPTION)
    ],
    subReportType: Annotated[
        int,
        Field(
            ge=MIN_SUB_REPORT_TYPE,
            le=MAX_SUB_REPORT_TYPE,
            description="Sub report type, see the hints for the values",
        ),
    ],
    filters: Annotated[
        Optional[List[FilterSpec]], Field(description=_FILTERS_DESCRIPTION)
    ] = None,
    pagination: Annotated[
        Optional[Pagination], Field(description="Limit and offset")
    ] = None,
) -> str:
    """List top N items for the sub section of a report.

    Returns the PlainSignal counts for one breakdown dimension, such as
    pages or countries, as JSON, unchanged.
    """
    query = ReportQuery(
        period_from=periodFrom,
        period_to=periodTo,
        period_selection=periodSelection,
        aggregation_window=aggregationWindow,
        filters=tuple(filters or ()),
        sub_report_type=subReportType,
        pagination=pagination,
    )
    return unwrap(
        await fetch_report(get_settings(), organizationID, domainID, query)
    )


# The descriptions are generated at runtime from the lookup tables, so the
# tools are registered with `add_tool` rather than the decorator.
mcp.add_tool(
    get_report,
    name="getReport",
    title="Get a PlainSignal analytics report",
    description=_get_report_description(),
)
mcp.add_tool(
    get_sub_report,
    name="getSubReport",
    title="List top N items for the sub section of a PlainSignal report",
    description=_get_sub_report_description(),
)
