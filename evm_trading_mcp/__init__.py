"""
EVM Trading MCP Package

This package provides a JSON-RPC tool server for Ethereum that speaks the MCP
(Model Context Protocol) tools/list and tools/call methods over stdio. Tools
query balances, derive token prices from Chainlink and Uniswap V3, and simulate
Uniswap V3 swaps without ever submitting a transaction.

Main components:
- server.py: stdio request loop and JSON-RPC dispatcher
- tools/: balance, price and swap tools behind a common Tool interface
- numeric.py: fixed-point conversions for on-chain integer values
- chain.py: Ethereum JSON-RPC client (eth_call, eth_getBalance)
- contracts.py: mainnet addresses and ABI function wrappers
"""

__version__ = "0.1.0"
