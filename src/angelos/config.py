"""
Runtime configuration sourced from the environment (and a local .env).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

from dotenv import load_dotenv

from .pneuma.explorer import DEFAULT_EXPLORER_API_URL

ALCHEMY_RPC_TEMPLATE = "https://eth-mainnet.g.alchemy.com/v2/{key}"
DEFAULT_EXPLORER_URL = "https://etherscan.io"
DEFAULT_SHARE_URL = "https://angelos.example/"
DEFAULT_CHAIN_ID = 1
DEFAULT_TICK_MS = 30
DEFAULT_HTTP_TIMEOUT = 30.0


def _env(*names: str) -> Optional[str]:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    explorer_api_url: str = DEFAULT_EXPLORER_API_URL
    explorer_api_key: Optional[str] = None
    explorer_url: str = DEFAULT_EXPLORER_URL
    chain_id: int = DEFAULT_CHAIN_ID
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    tick_ms: int = DEFAULT_TICK_MS
    share_url: str = DEFAULT_SHARE_URL

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Without an Alchemy key the shared ``demo`` tier is used.
        """
        if dotenv:
            load_dotenv()

        alchemy_key = _env("ALCHEMY_API_KEY", "PUBLIC_ALCHEMY_API_KEY") or "demo"
        return cls(
            rpc_url=_env("ANGELOS_RPC_URL") or ALCHEMY_RPC_TEMPLATE.format(key=alchemy_key),
            explorer_api_url=_env("ANGELOS_EXPLORER_API_URL") or DEFAULT_EXPLORER_API_URL,
            explorer_api_key=_env("ETHERSCAN_API_KEY", "PUBLIC_ETHERSCAN_API_KEY"),
            explorer_url=(_env("ANGELOS_EXPLORER_URL") or DEFAULT_EXPLORER_URL).rstrip("/"),
            chain_id=int(_env("ANGELOS_CHAIN_ID") or DEFAULT_CHAIN_ID),
            http_timeout=float(_env("ANGELOS_HTTP_TIMEOUT") or DEFAULT_HTTP_TIMEOUT),
            tick_ms=int(_env("ANGELOS_TICK_MS") or DEFAULT_TICK_MS),
            share_url=_env("ANGELOS_SHARE_URL") or DEFAULT_SHARE_URL,
        )

    def override(self, **changes) -> "Settings":
        """Copy with the non-None values of *changes* applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def explorer_address_url(self, address: str) -> str:
        return f"{self.explorer_url}/address/{address}"

    def share_link(self, address: str) -> str:
        return f"{self.share_url}?address={address}"
