from __future__ import annotations

import logging

from aiohttp import web

from server.http.common.dispatch import invoke_tool
from server.http.common.request_body import read_json_body
from server.http.common.responses import error_response, json_response
from shared.errors import MalformedRequestError
from shared.models import ErrorKind, ToolResult, ToolSuccess

logger = logging.getLogger("AgriGateway.RestAPI")


def render_tool_result(result: ToolResult) -> web.Response:
    if isinstance(result, ToolSuccess):
        return json_response({"success": True, "data": result.data})
    if result.kind is ErrorKind.TOOL_NOT_FOUND:
        return error_response(
            status=404,
            message=result.message,
            details={"available_tools": result.details.get("available_tools", [])},
        )
    if result.kind is ErrorKind.MALFORMED_REQUEST:
        return error_response(status=400, message=result.message)
    # handled tool calls are 200 whatever the outcome; the body carries the error
    return json_response({"error": result.message})


async def handle_tool_call(request: web.Request) -> web.Response:
    name = request.match_info["name"]
    try:
        body = await read_json_body(request)
    except MalformedRequestError as exc:
        logger.info("rest_malformed_body", extra={"tool": name, "error": str(exc)})
        return error_response(status=400, message=str(exc))
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return error_response(status=400, message="Invalid request: body must be a JSON object")

    result = await invoke_tool(request.app, name, body)
    return render_tool_result(result)
