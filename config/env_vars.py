from __future__ import annotations

import os


def env_str(name: str) -> str | None:
    """Stripped value of ``name``; blank and unset both read as ``None``."""
    raw = os.getenv(name)
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


def env_int(name: str, default: int, *, maximum: int | None = None) -> int:
    raw = env_str(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an int.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive.")
    if maximum is not None and value > maximum:
        raise ValueError(f"{name} must be <= {maximum}.")
    return value
