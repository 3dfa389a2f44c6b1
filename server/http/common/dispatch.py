from __future__ import annotations

import asyncio
from collections.abc import Mapping

from aiohttp import web

from shared.models import JSONValue, ToolRequest, ToolResult
from tools.tool_registry import ToolRegistry


async def invoke_tool(
    app: web.Application,
    name: str,
    args: Mapping[str, JSONValue],
) -> ToolResult:
    """Single invocation path behind both the REST and the JSON-RPC front-ends.

    Upstream calls use blocking ``requests``; the registry call runs in a worker thread.
    """
    registry: ToolRegistry = app["registry"]
    return await asyncio.to_thread(registry.call, ToolRequest(name=name, args=dict(args)))
