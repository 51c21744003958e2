"""
JSON-RPC client for Ethereum-compatible networks.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for
decoding. Read-only: bytecode lookups and zero-argument ``eth_call``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from eth_abi import decode
from eth_hash.auto import keccak

logger = logging.getLogger(__name__)


class RpcError(RuntimeError):
    """The node answered with a JSON-RPC ``error`` object or a malformed body."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data

    def __str__(self) -> str:
        # Revert reasons from custom errors only show up in data
        message = super().__str__()
        if self.data:
            return f"{message} (data: {self.data})"
        return message


def function_selector(signature: str) -> bytes:
    """First 4 bytes of keccak256(signature), e.g. ``getMessage()``."""
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(signature.encode("utf-8"))[:4]


def encode_call(function_name: str) -> str:
    """
    ABI-encode a call to a zero-argument function.

    Args:
        function_name: Function name (no parentheses)

    Returns:
        0x-prefixed hex encoded calldata
    """
    return "0x" + function_selector(f"{function_name}()").hex()


def decode_result(output_types: list[str], data: str) -> Any:
    """
    ABI-decode ``eth_call`` return data.

    Returns:
        Decoded result (single value or tuple)
    """
    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded


class RpcClient:
    """
    Minimal JSON-RPC 2.0 client bound to one endpoint.

    The caller owns *client* and is responsible for closing it.
    """

    def __init__(self, rpc_url: str, client: httpx.Client):
        self.rpc_url = rpc_url
        self._client = client
        self._next_id = 1

    def call(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node returned an error object or a non-object body
            httpx.HTTPError: On transport failure or non-2xx status
            ValueError: If the body is not JSON
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._next_id,
        }
        self._next_id += 1

        logger.debug("rpc %s %s", method, params)
        response = self._client.post(self.rpc_url, json=payload)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise RpcError(f"Malformed JSON-RPC response: {data!r}")

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                raise RpcError(
                    error.get("message") or f"RPC error: {error}",
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RpcError(f"RPC error: {error}")

        return data.get("result")

    def get_code(self, address: str, block: str = "latest") -> str:
        """Get the deployed bytecode at *address* (``"0x"`` when none)."""
        code = self.call("eth_getCode", [address, block])
        if code is not None and not isinstance(code, str):
            raise RpcError(f"Malformed eth_getCode result: {code!r}")
        return code

    def read_contract(
        self,
        contract_address: str,
        function_name: str,
        output_types: list[str],
        block: str = "latest",
    ) -> Any:
        """
        Read from a smart contract (eth_call) with no arguments.

        Args:
            contract_address: 0x-prefixed contract address
            function_name: Function to call
            output_types: ABI output types used for decoding

        Returns:
            Decoded return value(s), or None if the call returned no data
        """
        result = self.call(
            "eth_call",
            [{"to": contract_address, "data": encode_call(function_name)}, block],
        )

        if result is None or result == "0x":
            return None
        if not isinstance(result, str):
            raise RpcError(f"Malformed eth_call result: {result!r}")

        return decode_result(output_types, result)
