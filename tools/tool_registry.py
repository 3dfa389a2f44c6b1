from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from config.upstream_config import PriceApiConfig, SearchApiConfig
from shared.errors import GatewayError, ToolNotFoundError
from shared.models import ToolDescriptor, ToolFailure, ToolRequest, ToolResult
from shared.sanitize import sanitize_record
from tools.crop_price_tool import CropPriceTool
from tools.exa_search_tool import ExaSearchTool
from tools.http_client import HttpClient
from tools.param_schema import validate_arguments
from tools.protocols import Tool


class ToolRegistry:
    """Read-only name -> tool mapping, fixed at construction."""

    def __init__(
        self,
        tools: Iterable[Tool],
        logger: logging.Logger | None = None,
    ) -> None:
        by_name: dict[str, Tool] = {}
        for tool in tools:
            name = tool.descriptor.name
            if name in by_name:
                raise ValueError(f"Duplicate tool name: {name}")
            by_name[name] = tool
        self._tools: Mapping[str, Tool] = MappingProxyType(by_name)
        self._logger = logger or logging.getLogger("AgriGateway.ToolRegistry")
        for name in self._tools:
            self._logger.info("tool_registered", extra={"tool": name})

    def names(self) -> list[str]:
        return list(self._tools)

    def descriptors(self) -> list[ToolDescriptor]:
        return [tool.descriptor for tool in self._tools.values()]

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def call(self, request: ToolRequest) -> ToolResult:
        tool = self._tools.get(request.name)
        if tool is None:
            self._logger.warning("tool_not_found", extra={"tool": request.name})
            return ToolFailure.from_error(ToolNotFoundError(request.name, self.names()))

        logged_args = sanitize_record(request.args) if isinstance(request.args, Mapping) else {}
        self._logger.info("tool_call_start", extra={"tool": request.name, "tool_args": logged_args})
        try:
            args = validate_arguments(tool.descriptor, request.args)
            result = tool.handle(ToolRequest(name=request.name, args=args))
        except GatewayError as exc:
            self._logger.info(
                "tool_call_rejected",
                extra={"tool": request.name, "kind": exc.kind.value, "error": str(exc)},
            )
            return ToolFailure.from_error(exc)
        except Exception as exc:
            self._logger.exception("tool_call_error", extra={"tool": request.name})
            return ToolFailure.internal(exc)

        self._logger.info(
            "tool_call_end",
            extra={
                "tool": request.name,
                "ok": result.ok,
                "error": result.message if isinstance(result, ToolFailure) else None,
            },
        )
        return result


def build_default_registry(
    price_config: PriceApiConfig | None = None,
    search_config: SearchApiConfig | None = None,
    http_client: HttpClient | None = None,
) -> ToolRegistry:
    return ToolRegistry(
        [
            CropPriceTool(config=price_config, http_client=http_client),
            ExaSearchTool(config=search_config, http_client=http_client),
        ]
    )
