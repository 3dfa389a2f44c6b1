from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Final

from config.env_vars import env_int, env_str

DEFAULT_HOST: Final[str] = "0.0.0.0"
DEFAULT_PORT: Final[int] = 10000
DEFAULT_MAX_REQUEST_BYTES: Final[int] = 1_000_000
DEFAULT_PATH: Final[Path] = Path("config/http_server.json")
MAX_PORT: Final[int] = 65535


@dataclass(frozen=True)
class HttpServerConfig:
    """Listener settings for the gateway.

    Precedence, lowest first: dataclass defaults, ``config/http_server.json``,
    then ``AGRI_HTTP_*`` variables. Hosting platforms that only inject
    ``PORT`` are honoured when ``AGRI_HTTP_PORT`` is unset.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    max_request_bytes: int = DEFAULT_MAX_REQUEST_BYTES


def _file_int(
    data: dict[str, object],
    key: str,
    default: int,
    maximum: int | None = None,
) -> int:
    value = data.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"http_server.{key} must be a positive int.")
    if maximum is not None and value > maximum:
        raise ValueError(f"http_server.{key} must be <= {maximum}.")
    return value


def load_http_server_config(path: Path = DEFAULT_PATH) -> HttpServerConfig:
    if not path.exists():
        return HttpServerConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise RuntimeError(f"Failed to read {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object.")
    unknown = set(data) - {item.name for item in fields(HttpServerConfig)}
    if unknown:
        raise ValueError(f"{path.name} has unknown keys: {', '.join(sorted(unknown))}")

    host = data.get("host", DEFAULT_HOST)
    if not isinstance(host, str) or not host.strip():
        raise ValueError("http_server.host must be a non-empty string.")
    return HttpServerConfig(
        host=host.strip(),
        port=_file_int(data, "port", DEFAULT_PORT, MAX_PORT),
        max_request_bytes=_file_int(data, "max_request_bytes", DEFAULT_MAX_REQUEST_BYTES),
    )


def resolve_http_server_config(path: Path = DEFAULT_PATH) -> HttpServerConfig:
    base = load_http_server_config(path)
    port_var = "AGRI_HTTP_PORT" if env_str("AGRI_HTTP_PORT") is not None else "PORT"
    return HttpServerConfig(
        host=env_str("AGRI_HTTP_HOST") or base.host,
        port=env_int(port_var, base.port, maximum=MAX_PORT),
        max_request_bytes=env_int("AGRI_HTTP_MAX_REQUEST_BYTES", base.max_request_bytes),
    )
