"""
Test Package for EVM Trading MCP

This package contains the test suite for the EVM Trading MCP server.

Test Structure:
- unit/: numeric helpers, ABI wrappers and configuration
- integration/: tools, chain client and the JSON-RPC dispatcher, run against a
  scripted chain (no network access)
"""

# Test package for evm-trading-mcp
