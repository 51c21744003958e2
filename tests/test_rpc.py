"""Unit tests for pneuma/rpc.py."""

from __future__ import annotations

import json

import httpx
import pytest
from eth_abi import encode

from angelos.pneuma.rpc import RpcClient, RpcError, decode_result, encode_call, function_selector

from .conftest import CONTRACT, RPC_URL


def _client(handler) -> RpcClient:
    return RpcClient(RPC_URL, httpx.Client(transport=httpx.MockTransport(handler)))


class TestEncoding:
    """Tests for selector encoding and result decoding."""

    def test_known_selector(self) -> None:
        # ERC-20 name()
        assert function_selector("name()").hex() == "06fdde03"

    def test_encode_call(self) -> None:
        assert encode_call("name") == "0x06fdde03"

    def test_decode_string(self) -> None:
        data = "0x" + encode(["string"], ["gm ☀️"]).hex()
        assert decode_result(["string"], data) == "gm ☀️"

    def test_decode_without_prefix(self) -> None:
        assert decode_result(["string"], encode(["string"], ["x"]).hex()) == "x"


class TestRpcClient:
    """Tests for JSON-RPC request/response handling."""

    def test_get_code_payload(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            seen.append(body)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": "0x60"})

        assert _client(handler).get_code(CONTRACT) == "0x60"
        assert seen[0]["method"] == "eth_getCode"
        assert seen[0]["params"] == [CONTRACT, "latest"]
        assert seen[0]["jsonrpc"] == "2.0"

    def test_error_object_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": 1, "error": {"code": 3, "message": "execution reverted"}},
            )

        with pytest.raises(RpcError, match="execution reverted") as exc_info:
            _client(handler).call("eth_call", [])
        assert exc_info.value.code == 3

    def test_http_status_raises(self) -> None:
        with pytest.raises(httpx.HTTPStatusError):
            _client(lambda r: httpx.Response(429)).call("eth_getCode", [CONTRACT, "latest"])

    def test_read_contract_decodes(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            assert body["params"][0] == {"to": CONTRACT, "data": encode_call("getMessage")}
            result = "0x" + encode(["string"], ["hello"]).hex()
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

        assert _client(handler).read_contract(CONTRACT, "getMessage", ["string"]) == "hello"

    def test_read_contract_empty_result(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x"})

        assert _client(handler).read_contract(CONTRACT, "getMessage", ["string"]) is None

    def test_non_object_body_raises(self) -> None:
        with pytest.raises(RpcError, match="Malformed JSON-RPC response"):
            _client(lambda r: httpx.Response(200, json=["x"])).call("eth_getCode", [CONTRACT, "latest"])

    def test_non_string_code_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": 0})

        with pytest.raises(RpcError, match="Malformed eth_getCode result"):
            _client(handler).get_code(CONTRACT)

    def test_non_string_call_result_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"data": "0x"}})

        with pytest.raises(RpcError, match="Malformed eth_call result"):
            _client(handler).read_contract(CONTRACT, "getMessage", ["string"])

    def test_error_data_is_kept(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": 1,
                    "error": {"code": 3, "message": "execution reverted", "data": "0x08c379a0"},
                },
            )

        with pytest.raises(RpcError) as exc_info:
            _client(handler).call("eth_call", [])
        assert exc_info.value.data == "0x08c379a0"
        assert str(exc_info.value) == "execution reverted (data: 0x08c379a0)"

    def test_error_without_data(self) -> None:
        assert str(RpcError("execution reverted", code=3)) == "execution reverted"
