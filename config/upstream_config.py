from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from config.env_vars import env_int, env_str

DATAGOVIN_BASE_URL: Final[str] = "https://api.data.gov.in/resource"
DEFAULT_RESOURCE_ID: Final[str] = "35985678-0d79-46b4-9ed6-6f13308a1d24"
EXA_SEARCH_ENDPOINT: Final[str] = "https://api.exa.ai/search"
DEFAULT_UPSTREAM_TIMEOUT: Final[int] = 30
DEFAULT_UPSTREAM_MAX_BYTES: Final[int] = 5_000_000


@dataclass(frozen=True)
class PriceApiConfig:
    api_key: str | None = None
    resource_id: str = DEFAULT_RESOURCE_ID
    base_url: str = DATAGOVIN_BASE_URL
    timeout: int = DEFAULT_UPSTREAM_TIMEOUT
    max_bytes: int = DEFAULT_UPSTREAM_MAX_BYTES

    @property
    def key_set(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class SearchApiConfig:
    api_key: str | None = None
    endpoint: str = EXA_SEARCH_ENDPOINT
    timeout: int = DEFAULT_UPSTREAM_TIMEOUT
    max_bytes: int = DEFAULT_UPSTREAM_MAX_BYTES

    @property
    def key_set(self) -> bool:
        return bool(self.api_key)


def resolve_price_api_config() -> PriceApiConfig:
    return PriceApiConfig(
        api_key=env_str("DATAGOVIN_API_KEY"),
        resource_id=env_str("DATAGOVIN_RESOURCE_ID") or DEFAULT_RESOURCE_ID,
        timeout=env_int("DATAGOVIN_TIMEOUT", DEFAULT_UPSTREAM_TIMEOUT),
    )


def resolve_search_api_config() -> SearchApiConfig:
    return SearchApiConfig(
        api_key=env_str("EXA_API_KEY"),
        timeout=env_int("EXA_TIMEOUT", DEFAULT_UPSTREAM_TIMEOUT),
    )
