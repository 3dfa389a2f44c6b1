from __future__ import annotations

from typing import Final

from aiohttp import web

from shared.models import JSONValue

CORS_HEADERS: Final[dict[str, str]] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def json_response(payload: dict[str, JSONValue], *, status: int = 200) -> web.Response:
    return web.json_response(payload, status=status)


def error_response(
    *,
    status: int,
    message: str,
    details: dict[str, JSONValue] | None = None,
) -> web.Response:
    payload: dict[str, JSONValue] = {"error": message}
    if details:
        payload.update(details)
    return json_response(payload, status=status)
