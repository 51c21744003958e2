"""Shared fixtures: a fake JSON-RPC node + explorer behind httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx
import pytest
from eth_abi import encode

from angelos.config import Settings
from angelos.pneuma.rpc import encode_call

RPC_URL = "https://rpc.test/v2/test-key"
EXPLORER_API_URL = "https://explorer.test/v2/api"

CONTRACT = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
DEAD = "0x000000000000000000000000000000000000dead"

GET_MESSAGE_ABI = [
    {
        "type": "function",
        "name": "getMessage",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
    },
]


def verified(abi: list[dict[str, Any]]) -> dict[str, Any]:
    """Explorer success body with the ABI serialized as a JSON string."""
    return {"status": "1", "message": "OK", "result": json.dumps(abi)}


class FakeChain:
    """
    Answers eth_getCode / eth_call and explorer getabi requests.

    Every request is recorded in ``calls`` as (kind, payload).
    """

    def __init__(
        self,
        code: str = "0x608060405234801561001057600080fd5b50",
        explorer_body: Optional[dict[str, Any]] = None,
        returns: Optional[dict[str, str]] = None,
        call_error: Optional[dict[str, Any]] = None,
        raw_call_result: Optional[str] = None,
    ):
        self.code = code
        self.explorer_body = explorer_body if explorer_body is not None else verified(GET_MESSAGE_ABI)
        self.returns = returns if returns is not None else {"getMessage": "hello"}
        self.call_error = call_error
        self.raw_call_result = raw_call_result
        self.calls: list[tuple[str, Any]] = []

    def count(self, kind: Optional[str] = None) -> int:
        return len([c for c in self.calls if kind is None or c[0] == kind])

    def invoked(self) -> list[str]:
        """Function names called via eth_call, in order."""
        by_selector = {encode_call(name): name for name in self.returns}
        return [by_selector.get(p[0]["data"], p[0]["data"]) for k, p in self.calls if k == "eth_call"]

    def _rpc(self, body: dict[str, Any]) -> httpx.Response:
        method = body["method"]
        params = body["params"]
        self.calls.append((method, params))
        reply: dict[str, Any] = {"jsonrpc": "2.0", "id": body["id"]}

        if method == "eth_getCode":
            reply["result"] = self.code
        elif method == "eth_call":
            if self.call_error is not None:
                reply["error"] = self.call_error
            elif self.raw_call_result is not None:
                reply["result"] = self.raw_call_result
            else:
                data = params[0]["data"]
                for name, text in self.returns.items():
                    if encode_call(name) == data:
                        reply["result"] = "0x" + encode(["string"], [text]).hex()
                        break
                else:
                    reply["error"] = {"code": 3, "message": "execution reverted"}
        else:
            reply["error"] = {"code": -32601, "message": "method not found"}

        return httpx.Response(200, json=reply)

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "rpc.test":
            return self._rpc(json.loads(request.content))
        if request.url.host == "explorer.test":
            self.calls.append(("getabi", dict(request.url.params)))
            return httpx.Response(200, json=self.explorer_body)
        raise AssertionError(f"unexpected request to {request.url}")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        rpc_url=RPC_URL,
        explorer_api_url=EXPLORER_API_URL,
        explorer_api_key=None,
        chain_id=1,
        http_timeout=5.0,
        tick_ms=0,
    )


@pytest.fixture()
def chain() -> FakeChain:
    return FakeChain()
