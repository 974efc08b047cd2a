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

"""Lookup tables shared by the reporting tools.

The PlainSignal query API identifies report dimensions by small integers. Code
1 is the backend's "page" breakdown used by sub-report types and is never a
filter key.
"""

from types import MappingProxyType
from typing import List, Mapping, Optional

FILTER_CODES: Mapping[str, int] = MappingProxyType(
    {
        "page": 2,
        "referrer_id": 3,
        "referrer_type": 4,
        "segment_country": 5,
        "segment_timezone": 6,
        "segment_navigator_language": 7,
        "segment_navigator_language_region": 8,
        "segment_device_type": 9,
        "segment_os": 10,
        "segment_browser": 11,
        "segment_browser_major_version": 12,
        "segment_window_size": 13,
        "segment_window_size_layout": 14,
        "segment_channel": 15,
        "segment_utm_source": 16,
        "segment_utm_medium": 17,
        "segment_utm_campaign": 18,
        "segment_utm_content": 19,
        "segment_utm_term": 20,
        "segment_utm_ref": 21,
        "segment_page_load_latency": 22,
        "segment_page_load_status": 23,
        "segment_page_fcp": 24,
        "segment_page_lcp": 25,
    }
)

SUB_REPORT_TYPES: Mapping[int, str] = MappingProxyType(
    {
        1: "page",
        2: "entry page",
        3: "exit page",
        4: "country",
        5: "timezone",
        6: "navigator language",
        7: "referrer",
        8: "channel",
        9: "utm source",
        10: "utm medium",
        11: "utm campaign",
        12: "utm content",
        13: "utm term",
        14: "utm ref",
        15: "device type",
        16: "browser",
        17: "os",
        18: "status code",
        19: "page load latency",
        20: "page FCP",
        21: "page LCP",
    }
)


def resolve_filter_code(key: str) -> Optional[int]:
    """Returns the numeric filter code for `key`, or None if unknown."""
    return FILTER_CODES.get(key)


def valid_filter_keys() -> List[str]:
    return list(FILTER_CODES)


def get_filter_hints() -> str:
    """Returns a description of the accepted filter keys."""
    return f"""
          Each filter is an object with a `key` and a non-empty list of
          `values`. Multiple values for the same key are matched with OR.

          The available keys are {', '.join(FILTER_CODES)}.

          Example: {{"key": "segment_country", "values": ["US", "CA"]}}
          """


def get_sub_report_type_hints() -> str:
    """Returns a description of the `subReportType` enumeration."""
    types = ", ".join(
        f"{number} for {name}" for number, name in SUB_REPORT_TYPES.items()
    )
    return f"""
          Report types are an enumeration of values: {types}.
          """
