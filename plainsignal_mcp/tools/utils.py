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

"""Common utilities used by the MCP server.

Holds the process settings, the optional per-request access token used by the
HTTP transport, and the single GET executor every tool and resource goes
through.
"""

from contextvars import ContextVar
from importlib import metadata
from typing import Dict, Optional
import dataclasses
import json
import logging

import httpx

from plainsignal_mcp.config import Settings
from plainsignal_mcp.errors import (
    ErrorKind,
    Failure,
    ReportError,
    Result,
    Success,
)

logger = logging.getLogger(__name__)


def get_package_version() -> str:
    """Returns the version of the package.

    Falls back to 'unknown' if the version can't be resolved.
    """
    try:
        return metadata.version("plainsignal-mcp")
    except metadata.PackageNotFoundError:
        return "unknown"


# Adds a custom user agent to all API requests.
_USER_AGENT = f"plainsignal-mcp/{get_package_version()}"

_settings: Optional[Settings] = None

# Context variable to hold the current request's access token.
# Lets the HTTP transport serve several users with one process.
_current_access_token: ContextVar[Optional[str]] = ContextVar(
    "current_access_token", default=None
)


def configure(settings: Settings) -> None:
    """Installs the process settings. Called once at startup."""
    global _settings
    _settings = settings


def get_settings() -> Settings:
    """Returns the settings for the current call.

    The access token set via `set_access_token` for the current context, if
    any, replaces the startup token.
    """
    if _settings is None:
        raise RuntimeError("The server has not been configured")
    token = get_access_token()
    if token:
        return dataclasses.replace(_settings, access_token=token)
    return _settings


def set_access_token(token: str) -> None:
    """Sets the access token for the current request context."""
    _current_access_token.set(token)


def get_access_token() -> Optional[str]:
    """Gets the access token for the current request context."""
    return _current_access_token.get()


def clear_access_token() -> None:
    """Clears the access token for the current request context."""
    _current_access_token.set(None)


def create_http_client() -> httpx.AsyncClient:
    """Returns a client for one call against the PlainSignal API."""
    return httpx.AsyncClient(headers={"User-Agent": _USER_AGENT})


def request_headers(settings: Settings) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {settings.access_token}",
        "Content-Type": "application/json",
    }


async def _get(client: httpx.AsyncClient, url: str, settings: Settings):
    return await client.get(url, headers=request_headers(settings))


async def fetch_json_text(
    settings: Settings,
    path: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Result:
    """Issues a GET for `path` and returns the response body as JSON text.

    Args:
        settings: Credential and base URL for the call.
        path: API path, including any query string, starting with '/'.
        client: Client to send the request with. A fresh one is created and
          closed when omitted.

    Returns:
        `Success` with the body re-serialized as compact JSON, or `Failure`
        with an external-service error for a non-2xx status and an internal
        error for anything else that goes wrong.
    """
    url = f"{settings.api_base_url}{path}"
    try:
        if client is None:
            async with create_http_client() as own_client:
                response = await _get(own_client, url, settings)
        else:
            response = await _get(client, url, settings)

        if not response.is_success:
            message = f"HTTP error! status: {response.status_code}"
            logger.error("GET %s failed: %s", path, message)
            return Failure(
                ReportError(
                    ErrorKind.EXTERNAL_SERVICE,
                    message,
                    status_code=response.status_code,
                )
            )

        data = response.json()
    except Exception as e:
        logger.exception("Error fetching %s", path)
        return Failure(ReportError(ErrorKind.INTERNAL, str(e)))

    return Success(json.dumps(data, separators=(",", ":"), ensure_ascii=False))
