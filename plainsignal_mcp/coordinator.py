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

"""Module declaring the singleton MCP instance.

The singleton allows other modules to register their tools and resources with
the same MCP server using `@mcp.tool` and `@mcp.resource` annotations, thereby
'coordinating' the bootstrapping of the server.
"""

from mcp.server.fastmcp import FastMCP

# Creates the singleton.
mcp = FastMCP("plainsignal-stdio-mcp-server")
