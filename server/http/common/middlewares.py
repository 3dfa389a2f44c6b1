from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from aiohttp import web

from server.http.common.responses import CORS_HEADERS, error_response

logger = logging.getLogger("AgriGateway.HttpAPI")

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def cors_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    if request.method == "OPTIONS":
        response: web.StreamResponse = web.Response(status=200)
    else:
        response = await handler(request)
    response.headers.update(CORS_HEADERS)
    return response


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except web.HTTPException as exc:
        if exc.status < 400:
            raise
        message = "Not found" if exc.status == 404 else exc.reason
        return error_response(status=exc.status, message=message)
    except Exception as exc:
        logger.exception("unhandled_request_error", extra={"path": request.path})
        return error_response(status=500, message=f"Server error: {exc}")
