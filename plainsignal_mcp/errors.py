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

"""Error taxonomy shared by the executors and the MCP layer.

Executors never raise for expected failures. They return either a `Success`
carrying the JSON text to relay, or a `Failure` wrapping a `ReportError`.
The tool and resource handlers call `unwrap`, which turns a failure into an
`McpError`.

Over stdio, FastMCP wraps that error: a tool call comes back as an
`isError` result whose text is "Error executing tool <name>: <message>",
and a resource read fails with a `ResourceError`. Only the HTTP bridge in
`server.py` returns the JSON-RPC code itself.
"""

import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, ErrorData

# JSON-RPC reserves -32000..-32099 for implementation-defined server errors.
EXTERNAL_SERVICE_ERROR = -32000


class ErrorKind(enum.Enum):
    INVALID_PARAMETER = "invalid_parameter"
    EXTERNAL_SERVICE = "external_service"
    INTERNAL = "internal"


_ERROR_CODES = {
    ErrorKind.INVALID_PARAMETER: INVALID_PARAMS,
    ErrorKind.EXTERNAL_SERVICE: EXTERNAL_SERVICE_ERROR,
    ErrorKind.INTERNAL: INTERNAL_ERROR,
}


@dataclass(frozen=True)
class ReportError:
    """A classified failure of a single report or resource call."""

    kind: ErrorKind
    message: str
    status_code: Optional[int] = None

    @property
    def code(self) -> int:
        """Returns the JSON-RPC error code for this failure."""
        return _ERROR_CODES[self.kind]

    def to_mcp_error(self) -> McpError:
        return McpError(ErrorData(code=self.code, message=self.message))


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class Failure:
    error: ReportError


Result = Union[Success, Failure]


def unwrap(result: Result) -> str:
    """Returns the text of a `Success`, raises `McpError` for a `Failure`."""
    if isinstance(result, Failure):
        raise result.error.to_mcp_error()
    return result.text


class InvalidFilterKeyError(ValueError):
    """Raised when a filter key has no entry in the filter code table."""

    def __init__(self, key: str, valid_keys: Iterable[str]):
        self.key = key
        self.valid_keys = tuple(valid_keys)
        super().__init__(
            f"Invalid filter key '{key}', available keys are "
            f"{', '.join(self.valid_keys)}"
        )


class ConfigurationError(Exception):
    """Raised at startup when the server cannot be configured."""
