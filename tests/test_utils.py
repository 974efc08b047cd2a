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

import dataclasses
import logging

import httpx
import pytest

from plainsignal_mcp.errors import ErrorKind, Failure, Success
from plainsignal_mcp.tools import utils
from tests.conftest import API_BASE_URL, StubBackend


@pytest.mark.asyncio
async def test_success_relays_compact_json(settings):
    backend = StubBackend(json_body={"visits": 42})

    async with backend.client() as client:
        result = await utils.fetch_json_text(settings, "/domains", client)

    assert result == Success('{"visits":42}')


@pytest.mark.asyncio
async def test_sends_bearer_token_and_json_content_type(settings):
    backend = StubBackend(json_body=[])

    async with backend.client() as client:
        await utils.fetch_json_text(settings, "/domains", client)

    (request,) = backend.requests
    assert request.method == "GET"
    assert str(request.url) == f"{API_BASE_URL}/domains"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_non_success_status_is_external_service_error(settings):
    backend = StubBackend(status_code=500, json_body={"error": "boom"})

    async with backend.client() as client:
        result = await utils.fetch_json_text(settings, "/domains", client)

    assert isinstance(result, Failure)
    assert result.error.kind is ErrorKind.EXTERNAL_SERVICE
    assert result.error.status_code == 500
    assert "500" in result.error.message
    assert len(backend.requests) == 1


@pytest.mark.asyncio
async def test_invalid_json_is_internal_error(settings):
    backend = StubBackend(content=b"<html>not json</html>")

    async with backend.client() as client:
        result = await utils.fetch_json_text(settings, "/domains", client)

    assert isinstance(result, Failure)
    assert result.error.kind is ErrorKind.INTERNAL


@pytest.mark.asyncio
async def test_transport_failure_is_internal_error(settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler)
    ) as client:
        result = await utils.fetch_json_text(settings, "/domains", client)

    assert isinstance(result, Failure)
    assert result.error.kind is ErrorKind.INTERNAL
    assert "connection refused" in result.error.message


@pytest.mark.asyncio
async def test_creates_client_when_none_given(settings, backend):
    result = await utils.fetch_json_text(settings, "/domains")

    assert result == Success('{"ok":true}')
    assert len(backend.requests) == 1


def test_default_client_sends_user_agent():
    client = utils.create_http_client()
    assert client.headers["User-Agent"].startswith("plainsignal-mcp/")


def test_get_settings_requires_configuration(monkeypatch):
    monkeypatch.setattr(utils, "_settings", None)
    with pytest.raises(RuntimeError):
        utils.get_settings()


def test_request_token_overrides_startup_token(configured):
    utils.set_access_token("per-request")
    try:
        assert utils.get_settings() == dataclasses.replace(
            configured, access_token="per-request"
        )
    finally:
        utils.clear_access_token()

    assert utils.get_settings() is configured


@pytest.mark.asyncio
async def test_non_success_status_is_logged(settings, caplog):
    backend = StubBackend(status_code=502, json_body={})

    with caplog.at_level(logging.ERROR, logger=utils.__name__):
        async with backend.client() as client:
            await utils.fetch_json_text(settings, "/domains", client)

    (record,) = caplog.records
    assert record.levelno == logging.ERROR
    assert "status: 502" in record.getMessage()
    assert record.exc_info is None


@pytest.mark.asyncio
async def test_invalid_json_is_logged_with_traceback(settings, caplog):
    backend = StubBackend(content=b"not json")

    with caplog.at_level(logging.ERROR, logger=utils.__name__):
        async with backend.client() as client:
            await utils.fetch_json_text(settings, "/domains", client)

    (record,) = caplog.records
    assert record.levelno == logging.ERROR
    assert "/domains" in record.getMessage()
    assert record.exc_info is not None


@pytest.mark.asyncio
async def test_transport_failure_is_logged_with_traceback(settings, caplog):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with caplog.at_level(logging.ERROR, logger=utils.__name__):
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler)
        ) as client:
            await utils.fetch_json_text(settings, "/domains", client)

    (record,) = caplog.records
    assert isinstance(record.exc_info[1], httpx.ConnectError)
