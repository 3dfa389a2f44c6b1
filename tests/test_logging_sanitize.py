from __future__ import annotations

from shared.sanitize import sanitize_record


def test_sanitizer_masks_upstream_credentials() -> None:
    data = {
        "api-key": "supersecret",
        "headers": {"x-api-key": "exa-secret", "Content-Type": "application/json"},
        "limit": 50,
    }
    sanitized = sanitize_record(data)
    assert sanitized["api-key"] == "[secret]"
    assert sanitized["headers"]["x-api-key"] == "[secret]"
    assert sanitized["headers"]["Content-Type"] == "application/json"
    assert sanitized["limit"] == 50


def test_sanitizer_truncates_long_values() -> None:
    payload = "x" * 600
    sanitized = sanitize_record({"query": payload})
    query = sanitized["query"]
    assert isinstance(query, dict)
    assert query["bytes_count"] == 600
    assert "…[truncated]" in query["preview"]
    assert len(query["sha256"]) == 64


def test_sanitizer_keeps_lists() -> None:
    sanitized = sanitize_record({"include_domains": ["icar.org.in", "agricoop.nic.in"]})
    assert sanitized["include_domains"] == ["icar.org.in", "agricoop.nic.in"]
