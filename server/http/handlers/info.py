from __future__ import annotations

from datetime import UTC, datetime

from aiohttp import web

from config.http_server_config import HttpServerConfig
from config.upstream_config import PriceApiConfig, SearchApiConfig
from server.http.common.responses import json_response
from server.http.common.server_info import (
    RPC_ENDPOINT,
    SERVER_DESCRIPTION,
    SERVER_ID,
    SERVER_TITLE,
    SERVER_VERSION,
    TOOLS_PREFIX,
)
from shared.models import JSONValue
from tools.tool_registry import ToolRegistry


async def handle_index(request: web.Request) -> web.Response:
    registry: ToolRegistry = request.app["registry"]
    tools: list[JSONValue] = []
    examples: dict[str, JSONValue] = {}
    for descriptor in registry.descriptors():
        endpoint = f"{TOOLS_PREFIX}{descriptor.name}"
        tools.append(
            {
                "name": descriptor.name,
                "description": descriptor.description,
                "endpoint": endpoint,
                "method": "POST",
                "parameters": descriptor.to_doc(),
            }
        )
        examples[descriptor.name] = {
            "url": endpoint,
            "method": "POST",
            "body": dict(descriptor.example),
        }
    return json_response(
        {
            "name": SERVER_TITLE,
            "version": SERVER_VERSION,
            "description": SERVER_DESCRIPTION,
            "tools": tools,
            "usage": "POST to /tools/{tool-name} with JSON body containing tool parameters",
            "examples": examples,
            "rpc": {
                "endpoint": RPC_ENDPOINT,
                "method": "POST",
                "methods": ["initialize", "ping", "tools/list", "tools/call"],
            },
        }
    )


async def handle_health(request: web.Request) -> web.Response:
    registry: ToolRegistry = request.app["registry"]
    server_config: HttpServerConfig = request.app["server_config"]
    price_config: PriceApiConfig = request.app["price_config"]
    search_config: SearchApiConfig = request.app["search_config"]
    return json_response(
        {
            "status": "healthy",
            "server": SERVER_ID,
            "tools": list(registry.names()),
            "timestamp": datetime.now(UTC).isoformat(),
            "environment": {
                "datagovin_key_set": price_config.key_set,
                "exa_key_set": search_config.key_set,
                "port": server_config.port,
            },
        }
    )
