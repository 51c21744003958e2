"""
Ethereum address checks for Angelos.

Purely syntactic: nothing in this module touches the network.

An address is ``0x`` followed by 40 hex digits. All-lowercase and
all-uppercase bodies are accepted as-is; a mixed-case body must be a valid
EIP-55 checksum.
"""

from __future__ import annotations

import re

from eth_hash.auto import keccak

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")


def to_checksum_address(address: str) -> str:
    """
    Return the EIP-55 checksummed form of a 0x-prefixed hex address.

    Raises:
        ValueError: If the string is not 0x + 40 hex digits
    """
    if not _ADDRESS_RE.fullmatch(address):
        raise ValueError(f"Not a hex address: {address!r}")

    body = address[2:].lower()
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    digest = keccak(body.encode("ascii")).hex()
    chars = [
        ch.upper() if ch.isalpha() and int(digest[i], 16) >= 8 else ch
        for i, ch in enumerate(body)
    ]
    return "0x" + "".join(chars)


def is_address(value: str) -> bool:
    """Check whether *value* is an acceptable address string."""
    if not isinstance(value, str) or not _ADDRESS_RE.fullmatch(value):
        return False

    body = value[2:]
    if body == body.lower() or body == body.upper():
        return True
    return to_checksum_address(value) == value


def is_empty_code(code: str | None) -> bool:
    """True for the ``eth_getCode`` result of an account with no contract."""
    if not code:
        return True
    return code.lower() in ("0x", "0x0")
