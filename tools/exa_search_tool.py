from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Final

from config.upstream_config import SearchApiConfig
from shared.errors import ConfigurationError, GatewayError, UpstreamFormatError
from shared.models import (
    JSONValue,
    ParamSpec,
    ToolDescriptor,
    ToolFailure,
    ToolRequest,
    ToolResult,
    ToolSuccess,
)
from tools.http_client import HttpClient, HttpConfig, decode_json_body

logger = logging.getLogger("AgriGateway.ExaSearchTool")

SOURCE: Final[str] = "EXA API"
DEFAULT_NUM_RESULTS: Final[int] = 5
MAX_TEXT_CHARS: Final[int] = 500
TRUNCATION_MARKER: Final[str] = "..."
OPTIONAL_FIELDS: Final[tuple[str, ...]] = (
    "include_domains",
    "exclude_domains",
    "start_crawl_date",
    "end_crawl_date",
)

EXA_SEARCH_DESCRIPTOR: Final[ToolDescriptor] = ToolDescriptor(
    name="search",
    description="Search the web for agricultural information",
    params=(
        ParamSpec("query", "string", "Search query", required=True),
        ParamSpec(
            "num_results",
            "integer",
            "Number of results",
            default=DEFAULT_NUM_RESULTS,
            minimum=1,
            maximum=100,
        ),
        ParamSpec("include_domains", "array", "Domains to include", items="string"),
        ParamSpec("exclude_domains", "array", "Domains to exclude", items="string"),
        ParamSpec("start_crawl_date", "string", "Only pages crawled after this ISO date"),
        ParamSpec("end_crawl_date", "string", "Only pages crawled before this ISO date"),
    ),
    example={"query": "Indian agriculture news 2024", "num_results": 5},
)


def truncate_text(text: str | None) -> str | None:
    if text is None:
        return None
    if len(text) > MAX_TEXT_CHARS:
        return text[:MAX_TEXT_CHARS] + TRUNCATION_MARKER
    return text


class ExaSearchTool:
    descriptor = EXA_SEARCH_DESCRIPTOR

    def __init__(
        self,
        config: SearchApiConfig | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        self.config = config or SearchApiConfig()
        self.http = http_client or HttpClient(
            HttpConfig(timeout=self.config.timeout, max_bytes=self.config.max_bytes)
        )

    def handle(self, request: ToolRequest) -> ToolResult:
        try:
            return ToolSuccess(self._search(request.args))
        except GatewayError as exc:
            logger.warning("search_failed", extra={"kind": exc.kind.value, "error": str(exc)})
            return ToolFailure.from_error(exc)

    def build_payload(self, args: Mapping[str, JSONValue]) -> dict[str, JSONValue]:
        payload: dict[str, JSONValue] = {
            "query": args.get("query"),
            "num_results": args.get("num_results", DEFAULT_NUM_RESULTS),
            "use_autoprompt": True,
            "contents": {"text": True},
        }
        for field in OPTIONAL_FIELDS:
            if args.get(field) is not None:
                payload[field] = args[field]
        return payload

    def _search(self, args: Mapping[str, JSONValue]) -> dict[str, JSONValue]:
        api_key = self.config.api_key
        if not api_key:
            raise ConfigurationError("EXA_API_KEY")

        result = self.http.post_json(
            self.config.endpoint,
            json=self.build_payload(args),
            headers={"Content-Type": "application/json", "x-api-key": api_key},
            timeout=self.config.timeout,
        )
        payload = decode_json_body(result, SOURCE)

        results_raw = payload.get("results")
        if results_raw is None:
            results_raw = []
        if not isinstance(results_raw, list):
            raise UpstreamFormatError(result.text, SOURCE)

        results: list[JSONValue] = [self._normalize(item) for item in results_raw]
        return {
            "results": results,
            "total_results": len(results),
            "query": args.get("query"),
        }

    def _normalize(self, item: JSONValue) -> dict[str, JSONValue]:
        if not isinstance(item, Mapping):
            item = {}
        text = item.get("text")
        published = item.get("published_date")
        if published is None:
            published = item.get("publishedDate")
        return {
            "title": item.get("title"),
            "url": item.get("url"),
            "text": truncate_text(text if isinstance(text, str) else None),
            "score": item.get("score"),
            "published_date": published,
        }
