"""
Pneuma - On-chain interaction layer for Transmute.

Provides the ABI codec, JSON-RPC client, transaction builder and the
execution / query clients that drive a Uniswap V2 style router.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
