from __future__ import annotations

import logging

from aiohttp import web
from dotenv import load_dotenv

from config.http_server_config import HttpServerConfig, resolve_http_server_config
from config.upstream_config import (
    PriceApiConfig,
    SearchApiConfig,
    resolve_price_api_config,
    resolve_search_api_config,
)
from server.http.common.middlewares import cors_middleware, error_middleware
from server.http.common.server_info import RPC_ENDPOINT, SERVER_TITLE, TOOLS_PREFIX
from tools.tool_registry import ToolRegistry, build_default_registry

logger = logging.getLogger("AgriGateway.HttpAPI")


def create_app(
    *,
    registry: ToolRegistry | None = None,
    server_config: HttpServerConfig | None = None,
    price_config: PriceApiConfig | None = None,
    search_config: SearchApiConfig | None = None,
) -> web.Application:
    resolved_server_config = server_config or HttpServerConfig()
    resolved_price_config = price_config or PriceApiConfig()
    resolved_search_config = search_config or SearchApiConfig()
    app = web.Application(
        client_max_size=resolved_server_config.max_request_bytes,
        middlewares=[cors_middleware, error_middleware],
    )
    app["server_config"] = resolved_server_config
    app["price_config"] = resolved_price_config
    app["search_config"] = resolved_search_config
    app["registry"] = registry or build_default_registry(
        price_config=resolved_price_config,
        search_config=resolved_search_config,
    )
    from server.http.routes import register_routes

    register_routes(app)
    return app


def _log_banner(app: web.Application, config: HttpServerConfig) -> None:
    registry: ToolRegistry = app["registry"]
    base_url = f"http://localhost:{config.port}"
    logger.info("%s running on %s:%s", SERVER_TITLE, config.host, config.port)
    for name in registry.names():
        logger.info("Tool %s: %s%s%s", name, base_url, TOOLS_PREFIX, name)
    logger.info("JSON-RPC endpoint: %s%s", base_url, RPC_ENDPOINT)
    logger.info("Health check: %s/health", base_url)
    logger.info("API docs: %s/", base_url)
    if not app["price_config"].key_set:
        logger.warning("DATAGOVIN_API_KEY is not set; crop-price calls will fail.")
    if not app["search_config"].key_set:
        logger.warning("EXA_API_KEY is not set; search calls will fail.")


def run_server(config: HttpServerConfig) -> None:
    app = create_app(
        server_config=config,
        price_config=resolve_price_api_config(),
        search_config=resolve_search_api_config(),
    )
    _log_banner(app, config)
    web.run_app(app, host=config.host, port=config.port, print=None)


def main() -> None:
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = resolve_http_server_config()
    run_server(config)


if __name__ == "__main__":
    main()
