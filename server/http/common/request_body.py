from __future__ import annotations

import json

from aiohttp import web

from shared.errors import MalformedRequestError
from shared.models import JSONValue


async def read_json_body(request: web.Request) -> JSONValue:
    """Return the parsed body, or ``None`` when the body is empty."""
    try:
        raw = await request.text()
    except UnicodeDecodeError as exc:
        raise MalformedRequestError(f"Invalid request: {exc}") from exc
    if not raw.strip():
        return None
    try:
        parsed: JSONValue = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedRequestError(f"Invalid request: {exc}") from exc
    return parsed
