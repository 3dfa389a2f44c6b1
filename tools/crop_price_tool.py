from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Final
from urllib.parse import quote

from config.upstream_config import PriceApiConfig
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

logger = logging.getLogger("AgriGateway.CropPriceTool")

SOURCE: Final[str] = "data.gov.in"
DEFAULT_LIMIT: Final[int] = 50
DEFAULT_OFFSET: Final[int] = 0
# argument name -> data.gov.in filter column
FILTER_FIELDS: Final[tuple[tuple[str, str], ...]] = (
    ("state", "State"),
    ("district", "District"),
    ("commodity", "Commodity"),
)

CROP_PRICE_DESCRIPTOR: Final[ToolDescriptor] = ToolDescriptor(
    name="crop-price",
    description="Fetch crop price data from data.gov.in",
    params=(
        ParamSpec("state", "string", "State filter (e.g., Punjab, Maharashtra)"),
        ParamSpec("district", "string", "District filter (e.g., Ludhiana, Mumbai)"),
        ParamSpec("commodity", "string", "Commodity filter (e.g., Wheat, Rice, Cotton)"),
        ParamSpec("limit", "integer", "Max records to return", default=DEFAULT_LIMIT, minimum=1),
        ParamSpec("offset", "integer", "Records to skip", default=DEFAULT_OFFSET, minimum=0),
    ),
    example={"state": "Punjab", "commodity": "Wheat", "limit": 10},
)


class CropPriceTool:
    descriptor = CROP_PRICE_DESCRIPTOR

    def __init__(
        self,
        config: PriceApiConfig | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        self.config = config or PriceApiConfig()
        self.http = http_client or HttpClient(
            HttpConfig(timeout=self.config.timeout, max_bytes=self.config.max_bytes)
        )

    def handle(self, request: ToolRequest) -> ToolResult:
        try:
            return ToolSuccess(self._fetch(request.args))
        except GatewayError as exc:
            logger.warning("crop_price_failed", extra={"kind": exc.kind.value, "error": str(exc)})
            return ToolFailure.from_error(exc)

    def resource_url(self) -> str:
        return f"{self.config.base_url}/{quote(self.config.resource_id, safe='')}"

    def build_params(self, api_key: str, args: Mapping[str, JSONValue]) -> dict[str, str]:
        params = {
            "api-key": api_key,
            "format": "json",
            "limit": str(args.get("limit", DEFAULT_LIMIT)),
            "offset": str(args.get("offset", DEFAULT_OFFSET)),
        }
        for field, column in FILTER_FIELDS:
            # presence, not truthiness: an empty string is still sent
            if field in args and args[field] is not None:
                params[f"filters[{column}]"] = str(args[field])
        return params

    def _fetch(self, args: Mapping[str, JSONValue]) -> dict[str, JSONValue]:
        api_key = self.config.api_key
        if not api_key:
            raise ConfigurationError("DATAGOVIN_API_KEY")

        limit = args.get("limit", DEFAULT_LIMIT)
        offset = args.get("offset", DEFAULT_OFFSET)
        result = self.http.get_text(
            self.resource_url(),
            params=self.build_params(api_key, args),
            timeout=self.config.timeout,
        )
        payload = decode_json_body(result, SOURCE)

        records = payload.get("records")
        if records is None:
            records = []
        if not isinstance(records, list):
            raise UpstreamFormatError(result.text, SOURCE)
        total = payload.get("total")
        if total is None:
            total = len(records)

        query: dict[str, JSONValue] = {
            field: args[field] for field, _ in FILTER_FIELDS if args.get(field) is not None
        }
        return {
            "records": records,
            "total": total,
            "limit": limit,
            "offset": offset,
            "query": query,
        }
