"""
Integration Tests for EVM Trading MCP

These tests exercise the tools and the dispatcher end to end, with chain
access replaced by a scripted fake (helpers.FakeChain) or an httpx mock
transport.

Test files:
- conftest.py: Pytest fixtures
- helpers.py: FakeChain and shared test addresses
- test_balance_tool.py: get_balance
- test_price_tool.py: get_token_price
- test_swap_tool.py: swap_tokens
- test_chain_client.py: EthereumClient JSON-RPC handling
- test_server.py: tools/list, tools/call, error codes and the stdio loop
"""

# Integration tests for evm-trading-mcp
