from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Final

from aiohttp import web

from server.http.common.dispatch import invoke_tool
from server.http.common.request_body import read_json_body
from server.http.common.responses import json_response
from server.http.common.server_info import MCP_PROTOCOL_VERSION, SERVER_ID, SERVER_VERSION
from shared.errors import MalformedRequestError
from shared.models import ErrorKind, JSONValue, ToolResult, ToolSuccess
from tools.tool_registry import ToolRegistry

logger = logging.getLogger("AgriGateway.RpcAPI")

JSONRPC_VERSION: Final[str] = "2.0"
# id used when the request id cannot be recovered from the body
SENTINEL_ID: Final[int] = 0

PARSE_ERROR: Final[int] = -32700
INVALID_REQUEST: Final[int] = -32600
METHOD_NOT_FOUND: Final[int] = -32601
INVALID_PARAMS: Final[int] = -32602
INTERNAL_ERROR: Final[int] = -32603


class RpcError(Exception):
    def __init__(self, code: int, message: str, data: JSONValue = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def rpc_result(rpc_id: JSONValue, result: JSONValue) -> web.Response:
    return json_response({"jsonrpc": JSONRPC_VERSION, "id": rpc_id, "result": result})


def rpc_error(
    rpc_id: JSONValue,
    code: int,
    message: str,
    *,
    data: JSONValue = None,
    status: int = 200,
) -> web.Response:
    error: dict[str, JSONValue] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return json_response({"jsonrpc": JSONRPC_VERSION, "id": rpc_id, "error": error}, status=status)


def tool_result_to_rpc(result: ToolResult) -> dict[str, JSONValue]:
    if isinstance(result, ToolSuccess):
        text = json.dumps(result.data, indent=2, ensure_ascii=False)
        return {"content": [{"type": "text", "text": text}]}
    if result.kind is ErrorKind.TOOL_NOT_FOUND:
        raise RpcError(
            METHOD_NOT_FOUND,
            result.message,
            {"available_tools": result.details.get("available_tools", [])},
        )
    data: dict[str, JSONValue] = {"type": result.kind.value, **result.details}
    if result.kind is ErrorKind.INVALID_PARAMS:
        raise RpcError(INVALID_PARAMS, result.message, data)
    raise RpcError(INTERNAL_ERROR, result.message, data)


async def _initialize(request: web.Request, params: Mapping[str, JSONValue]) -> JSONValue:
    del request, params
    return {
        "protocolVersion": MCP_PROTOCOL_VERSION,
        "capabilities": {"tools": {"listChanged": False}},
        "serverInfo": {"name": SERVER_ID, "version": SERVER_VERSION},
    }


async def _ping(request: web.Request, params: Mapping[str, JSONValue]) -> JSONValue:
    del request, params
    return {}


async def _tools_list(request: web.Request, params: Mapping[str, JSONValue]) -> JSONValue:
    del params
    registry: ToolRegistry = request.app["registry"]
    return {
        "tools": [
            {
                "name": descriptor.name,
                "description": descriptor.description,
                "inputSchema": descriptor.to_schema(),
            }
            for descriptor in registry.descriptors()
        ]
    }


async def _tools_call(request: web.Request, params: Mapping[str, JSONValue]) -> JSONValue:
    name = params.get("name")
    if not isinstance(name, str) or not name:
        raise RpcError(INVALID_PARAMS, "tools/call requires a string 'name'")
    arguments = params.get("arguments")
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise RpcError(INVALID_PARAMS, "tools/call 'arguments' must be an object")
    result = await invoke_tool(request.app, name, arguments)
    return tool_result_to_rpc(result)


RpcMethod = Callable[[web.Request, Mapping[str, JSONValue]], Awaitable[JSONValue]]

RPC_METHODS: Final[Mapping[str, RpcMethod]] = {
    "initialize": _initialize,
    "ping": _ping,
    "tools/list": _tools_list,
    "tools/call": _tools_call,
}


async def handle_mcp(request: web.Request) -> web.Response:
    try:
        envelope = await read_json_body(request)
    except MalformedRequestError as exc:
        logger.info("rpc_parse_error", extra={"error": str(exc)})
        return rpc_error(SENTINEL_ID, PARSE_ERROR, "Parse error", data=str(exc), status=400)
    except web.HTTPRequestEntityTooLarge:
        logger.info("rpc_body_too_large", extra={"content_length": request.content_length})
        return rpc_error(SENTINEL_ID, INVALID_REQUEST, "Request too large", status=413)

    if isinstance(envelope, list):
        return rpc_error(
            SENTINEL_ID,
            INVALID_REQUEST,
            "Batch requests are not supported",
            status=400,
        )
    if not isinstance(envelope, dict):
        return rpc_error(SENTINEL_ID, INVALID_REQUEST, "Invalid Request", status=400)

    rpc_id = envelope.get("id")
    method = envelope.get("method")
    if not isinstance(method, str) or not method:
        return rpc_error(
            SENTINEL_ID if rpc_id is None else rpc_id,
            INVALID_REQUEST,
            "Invalid Request: 'method' must be a non-empty string",
            status=400,
        )
    params = envelope.get("params")
    if params is None:
        params = {}

    handler = RPC_METHODS.get(method)
    if handler is None:
        return rpc_error(rpc_id, METHOD_NOT_FOUND, f"Method not found: {method}")
    if not isinstance(params, Mapping):
        return rpc_error(rpc_id, INVALID_PARAMS, "'params' must be an object")

    try:
        result = await handler(request, params)
    except RpcError as exc:
        logger.info("rpc_error", extra={"method": method, "code": exc.code, "error": exc.message})
        return rpc_error(rpc_id, exc.code, exc.message, data=exc.data)
    except Exception as exc:
        logger.exception("rpc_internal_error", extra={"method": method})
        return rpc_error(rpc_id, INTERNAL_ERROR, f"Server error: {exc}")
    return rpc_result(rpc_id, result)
