from __future__ import annotations

import asyncio
import json

from tests.fakes import EXA_PAYLOAD, PUNJAB_WHEAT_PAYLOAD, FakeHttpClient, build_app, create_client


def _envelope(method: str, params: dict | None = None, rpc_id: object = 1) -> dict:
    envelope: dict = {"jsonrpc": "2.0", "id": rpc_id, "method": method}
    if params is not None:
        envelope["params"] = params
    return envelope


def test_initialize_returns_server_metadata() -> None:
    async def run() -> None:
        client = await create_client(build_app(FakeHttpClient()))
        try:
            resp = await client.post("/mcp", json=_envelope("initialize", rpc_id="init-1"))
            assert resp.status == 200
            payload = await resp.json()
            assert payload["jsonrpc"] == "2.0"
            assert payload["id"] == "init-1"
            result = payload["result"]
            assert result["serverInfo"] == {"name": "agricultural-ai-mcp", "version": "1.0.0"}
            assert "tools" in result["capabilities"]
            assert result["protocolVersion"]
        finally:
            await client.close()

    asyncio.run(run())


def test_tools_list_returns_both_descriptors() -> None:
    async def run() -> None:
        client = await create_client(build_app(FakeHttpClient()))
        try:
            resp = await client.post("/mcp", json=_envelope("tools/list"))
            payload = await resp.json()
            tools = payload["result"]["tools"]
            assert [tool["name"] for tool in tools] == ["crop-price", "search"]
            for tool in tools:
                assert tool["description"]
            crop_props = tools[0]["inputSchema"]["properties"]
            assert {"state", "district", "commodity", "limit", "offset"} <= set(crop_props)
            search_schema = tools[1]["inputSchema"]
            assert {"query", "num_results", "include_domains", "exclude_domains"} <= set(
                search_schema["properties"]
            )
            assert search_schema["required"] == ["query"]
        finally:
            await client.close()

    asyncio.run(run())


def test_tools_call_wraps_pretty_printed_data() -> None:
    fake = FakeHttpClient(body=PUNJAB_WHEAT_PAYLOAD)

    async def run() -> None:
        client = await create_client(build_app(fake))
        try:
            resp = await client.post(
                "/mcp",
                json=_envelope(
                    "tools/call",
                    {"name": "crop-price", "arguments": {"state": "Punjab", "limit": 5}},
                    rpc_id=42,
                ),
            )
            assert resp.status == 200
            payload = await resp.json()
            assert payload["id"] == 42
            assert "error" not in payload
            content = payload["result"]["content"]
            assert len(content) == 1
            assert content[0]["type"] == "text"
            assert "\n  " in content[0]["text"]
            data = json.loads(content[0]["text"])
            assert data["records"] == PUNJAB_WHEAT_PAYLOAD["records"]
            assert data["limit"] == 5
            assert data["query"] == {"state": "Punjab"}
        finally:
            await client.close()

    asyncio.run(run())


def test_rest_and_rpc_produce_identical_data() -> None:
    for tool, arguments, body in (
        (
            "crop-price",
            {"state": "Punjab", "commodity": "Wheat", "limit": 5},
            PUNJAB_WHEAT_PAYLOAD,
        ),
        ("search", {"query": "monsoon", "include_domains": ["imd.gov.in"]}, EXA_PAYLOAD),
    ):
        fake = FakeHttpClient(body=body)

        async def run() -> None:
            client = await create_client(build_app(fake))
            try:
                rest = await client.post(f"/tools/{tool}", json=arguments)
                rest_data = (await rest.json())["data"]
                rpc = await client.post(
                    "/mcp",
                    json=_envelope("tools/call", {"name": tool, "arguments": arguments}),
                )
                rpc_text = (await rpc.json())["result"]["content"][0]["text"]
                assert json.loads(rpc_text) == rest_data
            finally:
                await client.close()

        asyncio.run(run())
        assert len(fake.calls) == 2
        assert fake.calls[0][2] == fake.calls[1][2]


def test_tools_call_unknown_tool_is_32601_with_names() -> None:
    async def run() -> None:
        client = await create_client(build_app(FakeHttpClient()))
        try:
            resp = await client.post(
                "/mcp",
                json=_envelope("tools/call", {"name": "weather", "arguments": {}}, rpc_id=7),
            )
            assert resp.status == 200
            payload = await resp.json()
            assert payload["id"] == 7
            assert payload["error"]["code"] == -32601
            assert payload["error"]["data"] == {"available_tools": ["crop-price", "search"]}
            assert "result" not in payload
        finally:
            await client.close()

    asyncio.run(run())


def test_tools_call_handler_failure_is_32603() -> None:
    fake = FakeHttpClient(status=502, text="bad gateway")

    async def run() -> None:
        client = await create_client(build_app(fake))
        try:
            resp = await client.post(
                "/mcp",
                json=_envelope("tools/call", {"name": "search", "arguments": {"query": "q"}}),
            )
            payload = await resp.json()
            assert payload["error"]["code"] == -32603
            assert payload["error"]["message"] == "HTTP 502 fetching EXA API: bad gateway"
            assert payload["error"]["data"]["type"] == "upstream_http_error"
            assert payload["error"]["data"]["status"] == 502
        finally:
            await client.close()

    asyncio.run(run())


def test_tools_call_missing_credentials_is_32603() -> None:
    fake = FakeHttpClient(body=PUNJAB_WHEAT_PAYLOAD)

    async def run() -> None:
        client = await create_client(build_app(fake, price_key=None))
        try:
            resp = await client.post(
                "/mcp",
                json=_envelope("tools/call", {"name": "crop-price", "arguments": {}}),
            )
            payload = await resp.json()
            assert payload["error"]["code"] == -32603
            assert payload["error"]["data"]["type"] == "configuration_error"
        finally:
            await client.close()

    asyncio.run(run())
    assert fake.calls == []


def test_tools_call_invalid_arguments_are_32602() -> None:
    fake = FakeHttpClient(body=EXA_PAYLOAD)

    async def run() -> None:
        client = await create_client(build_app(fake))
        try:
            for params in (
                {"name": "search", "arguments": {"num_results": 3}},
                {"name": "search", "arguments": ["q"]},
                {"arguments": {"query": "q"}},
            ):
                resp = await client.post("/mcp", json=_envelope("tools/call", params))
                payload = await resp.json()
                assert payload["error"]["code"] == -32602
        finally:
            await client.close()

    asyncio.run(run())
    assert fake.calls == []


def test_unknown_method_is_32601() -> None:
    async def run() -> None:
        client = await create_client(build_app(FakeHttpClient()))
        try:
            resp = await client.post("/mcp", json=_envelope("resources/list", rpc_id="r"))
            assert resp.status == 200
            payload = await resp.json()
            assert payload["id"] == "r"
            assert payload["error"]["code"] == -32601
        finally:
            await client.close()

    asyncio.run(run())


def test_ping() -> None:
    async def run() -> None:
        client = await create_client(build_app(FakeHttpClient()))
        try:
            resp = await client.post("/mcp", json=_envelope("ping", rpc_id=3))
            assert await resp.json() == {"jsonrpc": "2.0", "id": 3, "result": {}}
        finally:
            await client.close()

    asyncio.run(run())


def test_unparsable_envelope_is_400_with_sentinel_id() -> None:
    async def run() -> None:
        client = await create_client(build_app(FakeHttpClient()))
        try:
            resp = await client.post("/mcp", data='{"id": 9, "method": ')
            assert resp.status == 400
            payload = await resp.json()
            assert payload["id"] == 0
            assert payload["error"]["code"] == -32700
        finally:
            await client.close()

    asyncio.run(run())


def test_invalid_envelopes_are_32600() -> None:
    async def run() -> None:
        client = await create_client(build_app(FakeHttpClient()))
        try:
            resp = await client.post("/mcp", json=[_envelope("ping")])
            assert resp.status == 400
            assert (await resp.json())["error"]["code"] == -32600

            resp = await client.post("/mcp", json={"jsonrpc": "2.0", "id": 5})
            assert resp.status == 400
            payload = await resp.json()
            assert payload["error"]["code"] == -32600
            assert payload["id"] == 5

            resp = await client.post("/mcp", data=b"")
            assert resp.status == 400
            assert (await resp.json())["id"] == 0
        finally:
            await client.close()

    asyncio.run(run())


def test_oversized_rpc_body_keeps_envelope() -> None:
    fake = FakeHttpClient(body=PUNJAB_WHEAT_PAYLOAD)

    async def run() -> None:
        client = await create_client(build_app(fake, max_request_bytes=64))
        try:
            envelope = _envelope(
                "tools/call",
                {"name": "crop-price", "arguments": {"state": "x" * 200}},
            )
            resp = await client.post("/mcp", json=envelope)
            assert resp.status == 413
            payload = await resp.json()
            assert payload["jsonrpc"] == "2.0"
            assert payload["id"] == 0
            assert payload["error"]["code"] == -32600
        finally:
            await client.close()

    asyncio.run(run())
    assert fake.calls == []
