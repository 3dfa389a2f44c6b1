from __future__ import annotations

from aiohttp import web


def register_routes(app: web.Application) -> None:
    from server.http.handlers import info, rest, rpc

    app.router.add_get("/", info.handle_index)
    app.router.add_get("/health", info.handle_health)
    app.router.add_post("/tools/{name:.*}", rest.handle_tool_call)
    app.router.add_post("/mcp", rpc.handle_mcp)
