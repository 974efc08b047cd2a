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

"""Resource listing the domains the access token can read."""

from typing import Optional

import httpx

from plainsignal_mcp.config import Settings
from plainsignal_mcp.coordinator import mcp
from plainsignal_mcp.errors import Result, unwrap
from plainsignal_mcp.tools.utils import fetch_json_text, get_settings

LIST_DOMAINS_URI = "plainsignal://listDomains"


async def fetch_domains(
    settings: Settings, client: Optional[httpx.AsyncClient] = None
) -> Result:
    return await fetch_json_text(settings, "/domains", client)


@mcp.resource(
    LIST_DOMAINS_URI,
    name="listDomains",
    description="Get a list of available domains",
    mime_type="application/json",
)
async def list_domains() -> str:
    """Returns the domains visible to the configured access token."""
    result = await fetch_domains(get_settings())
    return unwrap(result)
