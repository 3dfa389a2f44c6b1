from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import requests

from shared.errors import UpstreamFormatError, UpstreamHttpError, UpstreamUnreachableError
from shared.models import JSONValue
from shared.sanitize import sanitize_record

logger = logging.getLogger("AgriGateway.HTTPClient")


@dataclass
class HttpConfig:
    timeout: int = 30
    max_bytes: int = 5_000_000


@dataclass(frozen=True)
class HttpResult:
    status_code: int
    text: str
    truncated: bool = False
    headers: dict[str, str] | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpClient:
    """One outbound request per call; the body is read in full whatever the status."""

    def __init__(self, config: HttpConfig | None = None) -> None:
        self.config = config or HttpConfig()

    def get_text(self, url: str, **kwargs: Any) -> HttpResult:
        return self._request("GET", url, **kwargs)

    def post_json(self, url: str, **kwargs: Any) -> HttpResult:
        return self._request("POST", url, **kwargs)

    def _request(self, method: str, url: str, **kwargs: Any) -> HttpResult:
        timeout = kwargs.pop("timeout", self.config.timeout)
        source = urlparse(url).netloc or url
        params = sanitize_record(kwargs.get("params") or {})
        logger.debug("upstream_request", extra={"method": method, "url": url, "params": params})
        try:
            response = requests.request(
                method=method,
                url=url,
                timeout=timeout,
                stream=True,
                **kwargs,
            )
        except requests.Timeout as exc:
            logger.error("HTTP %s timeout for %s", method, source)
            raise UpstreamUnreachableError("timeout", source) from exc
        except requests.RequestException as exc:
            reason = exc.__class__.__name__
            logger.error("HTTP %s error for %s: %s", method, source, reason)
            raise UpstreamUnreachableError(reason, source) from exc

        try:
            text, truncated = self._read_limited(response)
        except requests.RequestException as exc:
            reason = exc.__class__.__name__
            logger.error("HTTP %s body read failed for %s: %s", method, source, reason)
            raise UpstreamUnreachableError(reason, source) from exc
        finally:
            response.close()

        if truncated:
            logger.warning("HTTP %s body truncated for %s (payload too large)", method, source)
        return HttpResult(
            status_code=response.status_code,
            text=text,
            truncated=truncated,
            headers=dict(response.headers),
        )

    def _read_limited(self, response: requests.Response) -> tuple[str, bool]:
        total = 0
        truncated = False
        collected: list[bytes] = []
        for chunk in response.iter_content(chunk_size=4096):
            if not chunk:
                continue
            total += len(chunk)
            if total > self.config.max_bytes:
                truncated = True
                break
            collected.append(chunk)
        encoding = getattr(response, "encoding", None) or "utf-8"
        return b"".join(collected).decode(encoding, errors="replace"), truncated


def decode_json_body(result: HttpResult, source: str) -> dict[str, JSONValue]:
    if not result.ok:
        raise UpstreamHttpError(result.status_code, result.text, source)
    if result.truncated:
        raise UpstreamFormatError(result.text, source)
    try:
        parsed = json.loads(result.text)
    except json.JSONDecodeError as exc:
        raise UpstreamFormatError(result.text, source) from exc
    if not isinstance(parsed, dict):
        raise UpstreamFormatError(result.text, source)
    return parsed
