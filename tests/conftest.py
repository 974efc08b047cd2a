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

"""Shared fixtures for the PlainSignal MCP tests."""

import httpx
import pytest

from plainsignal_mcp.config import Settings
from plainsignal_mcp.tools import utils

API_BASE_URL = "https://api.test/api/v1"


class StubBackend:
    """Records requests and answers them with a fixed response."""

    def __init__(self, status_code=200, json_body=None, content=None):
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def settings():
    return Settings(access_token="test-token", api_base_url=API_BASE_URL)


@pytest.fixture
def configured(monkeypatch, settings):
    """Installs `settings` as the process settings for the test."""
    monkeypatch.setattr(utils, "_settings", settings)
    return settings


@pytest.fixture
def backend(monkeypatch):
    """A stub backend that every new HTTP client talks to."""
    stub = StubBackend(json_body={"ok": True})
    monkeypatch.setattr(utils, "create_http_client", stub.client)
    return stub
