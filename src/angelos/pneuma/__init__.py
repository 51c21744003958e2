"""
Pneuma - On-chain read layer for Angelos.

Provides a JSON-RPC client, an explorer ABI client and ABI parsing
for reading verified contracts.

Uses httpx + eth-abi + eth-hash instead of the heavyweight web3.py.
"""
