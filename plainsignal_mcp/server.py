#!/usr/bin/env python

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

"""Entry point for the PlainSignal MCP server.

Supports two modes:
- stdio: local CLI usage (default)
- http: a minimal JSON bridge for remote clients

HTTP mode accepts an optional OAuth token in the Authorization header, which
replaces the startup token for that request.
"""

from typing import List, Optional
import argparse
import json
import logging
import os
import sys

from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    PARSE_ERROR,
)
from pydantic import ValidationError

from plainsignal_mcp.config import DEFAULT_API_BASE_URL, load_settings
from plainsignal_mcp.coordinator import mcp
from plainsignal_mcp.errors import EXTERNAL_SERVICE_ERROR, ConfigurationError
from plainsignal_mcp.tools import utils

# The following imports are necessary to register the tools and resources
# with the `mcp` object, even though they are not directly used in this file.
from plainsignal_mcp.tools.admin import domains  # noqa: F401
from plainsignal_mcp.tools.reporting import core  # noqa: F401

logger = logging.getLogger(__name__)

_HTTP_STATUS_FOR_ERROR_CODE = {
    INVALID_PARAMS: 400,
    EXTERNAL_SERVICE_ERROR: 502,
}


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plainsignal-mcp",
        description="MCP server for the PlainSignal analytics API.",
        epilog=f"Default API base URL: {DEFAULT_API_BASE_URL}",
    )
    parser.add_argument(
        "-t",
        "--token",
        default=os.environ.get("PLAINSIGNAL_TOKEN"),
        help="PlainSignal access token (env: PLAINSIGNAL_TOKEN)",
    )
    parser.add_argument(
        "-u",
        "--api-base-url",
        default=os.environ.get(
            "PLAINSIGNAL_API_BASE_URL", DEFAULT_API_BASE_URL
        ),
        help="PlainSignal API base URL (env: PLAINSIGNAL_API_BASE_URL)",
    )
    return parser


def _configure_logging() -> None:
    # stdout carries the stdio transport, so logs go to stderr.
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _find_mcp_error(exc: BaseException) -> Optional[McpError]:
    """Returns the McpError behind `exc`.

    FastMCP wraps errors raised by tools and resources, so the exception chain
    is searched.
    """
    while exc is not None:
        if isinstance(exc, McpError):
            return exc
        exc = exc.__cause__ or exc.__context__
    return None


def run_server() -> None:
    """Runs the server in stdio mode."""
    mcp.run()


def create_http_app():
    """Returns the Starlette app serving the HTTP bridge.

    Routes:
    - GET /health: liveness probe
    - POST /mcp: JSON bridge for `initialize`, `tools/list`, `tools/call`,
      `resources/list` and `resources/read`
    """
    from starlette.applications import Starlette
    from starlette.middleware import Middleware
    from starlette.middleware.cors import CORSMiddleware
    from starlette.responses import JSONResponse
    from starlette.routing import Route

    def error_response(code: int, message: str, status_code: int):
        return JSONResponse(
            {"error": {"code": code, "message": message}},
            status_code=status_code,
        )

    async def health(request):
        """Health check endpoint."""
        return JSONResponse({"status": "ok"})

    async def call_tool(params):
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}
        if not tool_name:
            return error_response(INVALID_PARAMS, "Missing tool name", 400)

        tool = mcp._tool_manager._tools.get(tool_name)
        if not tool:
            return error_response(
                INVALID_PARAMS, f"Unknown tool: {tool_name}", 404
            )

        text = await tool.fn_metadata.call_fn_with_arg_validation(
            tool.fn, tool.is_async, arguments, None
        )
        return JSONResponse({"content": [{"type": "text", "text": text}]})

    async def read_resource(params):
        uri = params.get("uri")
        resource = mcp._resource_manager._resources.get(str(uri))
        if not resource:
            return error_response(
                INVALID_PARAMS, f"Unknown resource: {uri}", 404
            )

        text = await resource.read()
        return JSONResponse(
            {
                "contents": [
                    {
                        "uri": str(resource.uri),
                        "mimeType": resource.mime_type,
                        "text": text,
                    }
                ]
            }
        )

    async def mcp_endpoint(request):
        """Handles MCP protocol requests over HTTP.

        Request format:
        {
            "method": "tools/call",
            "params": {
                "name": "getReport",
                "arguments": {...}
            }
        }
        """
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            utils.set_access_token(auth_header[len("Bearer ") :])

        try:
            try:
                body = await request.json()
            except json.JSONDecodeError as e:
                logger.error("Malformed MCP request body: %s", e)
                return error_response(PARSE_ERROR, f"Parse error: {e}", 400)

            params = body.get("params") if isinstance(body, dict) else None
            if params is None:
                params = {}
            if not isinstance(body, dict) or not isinstance(params, dict):
                logger.error("MCP request is not a JSON object")
                return error_response(
                    INVALID_REQUEST,
                    "Request must be a JSON object with object params",
                    400,
                )
            method = body.get("method", "")

            if method == "tools/list":
                tools = [
                    {
                        "name": name,
                        "description": tool.description or "",
                        "inputSchema": tool.parameters or {},
                    }
                    for name, tool in mcp._tool_manager._tools.items()
                ]
                return JSONResponse({"tools": tools})

            elif method == "tools/call":
                return await call_tool(params)

            elif method == "resources/list":
                resources = [
                    {
                        "uri": uri,
                        "name": resource.name,
                        "description": resource.description or "",
                        "mimeType": resource.mime_type,
                    }
                    for uri, resource in (
                        mcp._resource_manager._resources.items()
                    )
                ]
                return JSONResponse({"resources": resources})

            elif method == "resources/read":
                return await read_resource(params)

            elif method == "initialize":
                return JSONResponse(
                    {
                        "protocolVersion": "2024-11-05",
                        "serverInfo": {
                            "name": mcp.name,
                            "version": utils.get_package_version(),
                        },
                        "capabilities": {"tools": {}, "resources": {}},
                    }
                )

            else:
                return error_response(
                    INVALID_PARAMS, f"Unknown method: {method}", 400
                )

        except ValidationError as e:
            logger.error("Invalid MCP request parameters: %s", e)
            return error_response(INVALID_PARAMS, str(e), 400)
        except Exception as e:
            mcp_error = _find_mcp_error(e)
            if mcp_error is None:
                logger.exception("Error handling MCP request")
                return error_response(INTERNAL_ERROR, str(e), 500)
            logger.error("MCP request failed: %s", mcp_error.error.message)
            return error_response(
                mcp_error.error.code,
                mcp_error.error.message,
                _HTTP_STATUS_FOR_ERROR_CODE.get(mcp_error.error.code, 500),
            )
        finally:
            utils.clear_access_token()

    return Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Route("/mcp", mcp_endpoint, methods=["POST", "OPTIONS"]),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["*"],
                allow_headers=["*"],
            )
        ],
    )


def run_http_server() -> None:
    """Runs the server in HTTP mode.

    Environment variables:
    - PORT: HTTP port to listen on (default: 8080)
    - HOST: Host to bind to (default: 127.0.0.1)
    """
    import uvicorn

    port = int(os.environ.get("PORT", "8080"))
    host = os.environ.get("HOST", "127.0.0.1")

    logger.info("Starting HTTP server on %s:%s", host, port)
    logger.info("Health check: http://%s:%s/health", host, port)
    logger.info("MCP endpoint: http://%s:%s/mcp", host, port)

    uvicorn.run(create_http_app(), host=host, port=port, log_level="info")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point that selects server mode based on environment.

    Exits with status 1 and a usage message when no access token is given.
    """
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging()

    try:
        settings = load_settings(args.token, args.api_base_url)
    except ConfigurationError as e:
        parser.print_usage(sys.stderr)
        parser.exit(
            1,
            f"Error: {e}. Pass --token <access_token> or set "
            "PLAINSIGNAL_TOKEN.\n",
        )

    utils.configure(settings)

    mode = os.environ.get("MCP_SERVER_MODE", "stdio").lower()
    logger.info(
        "Using PlainSignal API at %s (%s mode)", settings.api_base_url, mode
    )
    if mode == "http":
        run_http_server()
    else:
        run_server()


if __name__ == "__main__":
    main()
