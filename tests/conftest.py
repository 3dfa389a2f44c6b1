from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

GATEWAY_ENV_VARS = (
    "DATAGOVIN_API_KEY",
    "DATAGOVIN_RESOURCE_ID",
    "DATAGOVIN_TIMEOUT",
    "EXA_API_KEY",
    "EXA_TIMEOUT",
    "AGRI_HTTP_HOST",
    "AGRI_HTTP_PORT",
    "AGRI_HTTP_MAX_REQUEST_BYTES",
    "PORT",
)


@pytest.fixture(autouse=True)
def _isolate_gateway_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in GATEWAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _block_real_network(monkeypatch: pytest.MonkeyPatch) -> None:
    def _refuse(*args: object, **kwargs: object) -> None:
        raise AssertionError("unexpected outbound request in tests")

    monkeypatch.setattr("tools.http_client.requests.request", _refuse)
