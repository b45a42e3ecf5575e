"""
Chain - On-chain interaction layer for the attendance bridge.

Provides a JSON-RPC client, ABI encoding for the attendance contract, and
transaction utilities.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
