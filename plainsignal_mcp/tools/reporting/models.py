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

"""Parameter records for the reporting tools.

FastMCP derives each tool's input schema from these models, so the field
constraints here are what the client sees.
"""

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

PeriodSelection = Literal["d", "m", "y"]
AggregationWindow = Literal["d", "h"]

MIN_SUB_REPORT_TYPE = 1
MAX_SUB_REPORT_TYPE = 21


class FilterSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Filter key, e.g. segment_country")
    values: Tuple[str, ...] = Field(
        min_length=1, description="Values to match, e.g. ['US', 'CA']"
    )


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: Optional[int] = Field(
        default=None,
        ge=0,
        description="Number of records to return; default is 1000",
    )
    offset: Optional[int] = Field(
        default=None,
        ge=0,
        description="Offset to start for the records; default 0",
    )


class ReportQuery(BaseModel):
    """A single report request, immutable once built.

    `sub_report_type` selects the counts endpoint; without it the query is a
    full analytics report and `pagination` is ignored.
    """

    model_config = ConfigDict(frozen=True)

    period_from: str
    period_to: str
    period_selection: PeriodSelection
    aggregation_window: AggregationWindow
    filters: Tuple[FilterSpec, ...] = ()
    sub_report_type: Optional[int] = Field(
        default=None, ge=MIN_SUB_REPORT_TYPE, le=MAX_SUB_REPORT_TYPE
    )
    pagination: Optional[Pagination] = None

    @property
    def is_sub_report(self) -> bool:
        return self.sub_report_type is not None
