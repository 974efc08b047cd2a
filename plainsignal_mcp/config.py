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

"""Startup configuration for the PlainSignal MCP server."""

from dataclasses import dataclass
from typing import Optional

from plainsignal_mcp.errors import ConfigurationError

DEFAULT_API_BASE_URL = "https://app.plainsignal.com/api/v1"


@dataclass(frozen=True)
class Settings:
    """Credential and backend endpoint, fixed for the process lifetime."""

    access_token: str
    api_base_url: str = DEFAULT_API_BASE_URL

    def __repr__(self) -> str:
        return (
            f"Settings(access_token='***', "
            f"api_base_url={self.api_base_url!r})"
        )


def load_settings(
    access_token: Optional[str], api_base_url: Optional[str] = None
) -> Settings:
    """Returns validated settings.

    Raises:
        ConfigurationError: if no access token was supplied.
    """
    access_token = (access_token or "").strip()
    if not access_token:
        raise ConfigurationError("Access token is required")
    api_base_url = (api_base_url or "").strip().rstrip("/")
    return Settings(
        access_token=access_token,
        api_base_url=api_base_url or DEFAULT_API_BASE_URL,
    )
