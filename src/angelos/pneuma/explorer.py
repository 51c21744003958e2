"""
Block-explorer ABI client (Etherscan v2 multichain API).

One GET per lookup:

    {api_url}?chainid=1&module=contract&action=getabi&address=0x...[&apikey=...]

The body is ``{"status": "1"|"0", "message": ..., "result": ...}``. On
success ``result`` is the ABI serialized as a JSON string; on failure it is
a human-readable error string.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_EXPLORER_API_URL = "https://api.etherscan.io/v2/api"


class ExplorerError(RuntimeError):
    """The explorer did not return a usable verified ABI."""


def parse_abi_payload(data: Any) -> list[dict[str, Any]]:
    """
    Extract the ABI list from an explorer response body.

    ``result`` may be a JSON string (possibly encoded twice) or an
    already-decoded list.

    Raises:
        ExplorerError: On non-success status or missing/unparseable ABI
    """
    if not isinstance(data, dict):
        raise ExplorerError("Explorer returned an unexpected response.")

    result = data.get("result")
    if str(data.get("status")) != "1" or not result:
        detail = result if isinstance(result, str) and result else data.get("message")
        raise ExplorerError(detail or "Contract source code not verified")

    abi = result
    # Some explorers double-encode: a JSON string containing a JSON string
    for _ in range(2):
        if not isinstance(abi, str):
            break
        try:
            abi = json.loads(abi)
        except json.JSONDecodeError as exc:
            raise ExplorerError(f"Unparseable ABI payload: {exc}") from exc

    if not isinstance(abi, list):
        raise ExplorerError("ABI payload is not a list of entries.")

    return abi


class ExplorerClient:
    """
    Fetches verified contract ABIs.

    The caller owns *client* and is responsible for closing it.
    """

    def __init__(
        self,
        client: httpx.Client,
        api_url: str = DEFAULT_EXPLORER_API_URL,
        chain_id: int = 1,
        api_key: Optional[str] = None,
    ):
        self._client = client
        self.api_url = api_url
        self.chain_id = chain_id
        self.api_key = api_key

    def query_params(self, address: str) -> dict[str, str]:
        params = {
            "chainid": str(self.chain_id),
            "module": "contract",
            "action": "getabi",
            "address": address,
        }
        if self.api_key:
            params["apikey"] = self.api_key
        return params

    def get_abi(self, address: str) -> list[dict[str, Any]]:
        """
        Fetch and decode the verified ABI for *address*.

        Raises:
            ExplorerError: If the contract is not verified or the body is unusable
            httpx.HTTPError: On transport failure, or a non-2xx status whose
                body is not an explorer JSON object
        """
        logger.debug("explorer getabi %s chainid=%s", address, self.chain_id)
        response = self._client.get(self.api_url, params=self.query_params(address))

        # The body's status field decides, whatever the HTTP status line says
        try:
            data = response.json()
        except ValueError as exc:
            response.raise_for_status()
            raise ExplorerError(f"Explorer returned a non-JSON body: {exc}") from exc

        if not isinstance(data, dict):
            response.raise_for_status()
        return parse_abi_payload(data)
