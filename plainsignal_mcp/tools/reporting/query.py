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

"""Translates report parameters into PlainSignal API paths."""

from typing import List, Tuple
from urllib.parse import quote, urlencode

from plainsignal_mcp.errors import InvalidFilterKeyError
from plainsignal_mcp.tools.reporting.filters import (
    resolve_filter_code,
    valid_filter_keys,
)
from plainsignal_mcp.tools.reporting.models import ReportQuery

ANALYTICS_ENDPOINT = "analytics"
COUNTS_ENDPOINT = "counts"


def build_query_params(query: ReportQuery) -> List[Tuple[str, str]]:
    """Returns the ordered query parameters for `query`.

    Timestamps are passed through untouched; the backend parses them.

    Raises:
        InvalidFilterKeyError: if a filter key is not in the filter code
          table. Nothing is returned in that case.
    """
    params = [
        ("period_from", query.period_from),
        ("period_to", query.period_to),
        ("period_selection", query.period_selection),
        ("aggregation_window", query.aggregation_window),
    ]
    if query.is_sub_report:
        params.append(("stat_type", str(query.sub_report_type)))

    for report_filter in query.filters:
        code = resolve_filter_code(report_filter.key)
        if code is None:
            raise InvalidFilterKeyError(report_filter.key, valid_filter_keys())
        params.append((str(code), ",".join(report_filter.values)))

    # Zero is treated the same as not provided.
    if query.is_sub_report and query.pagination:
        if query.pagination.limit:
            params.append(("limit", str(query.pagination.limit)))
        if query.pagination.offset:
            params.append(("offset", str(query.pagination.offset)))

    return params


def construct_report_path(
    organization_id: str, domain_id: str, query: ReportQuery
) -> str:
    """Returns the API path and query string for `query`.

    Sub-report queries target the counts endpoint, everything else the
    analytics endpoint.
    """
    endpoint = COUNTS_ENDPOINT if query.is_sub_report else ANALYTICS_ENDPOINT
    return (
        f"/organizations/{quote(organization_id, safe='')}"
        f"/domains/{quote(domain_id, safe='')}/{endpoint}"
        f"?{urlencode(build_query_params(query))}"
    )
