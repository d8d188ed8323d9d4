"""
Tool registry for the EVM trading server.

The registry is built once at startup and is read-only afterwards.
"""

from types import MappingProxyType
from typing import Mapping

from .balance import GetBalanceTool
from .base import Tool
from .price import GetTokenPriceTool
from .swap import SwapTokensTool

__all__ = ["GetBalanceTool", "GetTokenPriceTool", "SwapTokensTool", "Tool", "build_registry"]


def build_registry(native_symbol: str = "ETH") -> Mapping[str, Tool]:
    """Instantiate every tool and index it by name."""
    tools = [
        GetBalanceTool(native_symbol=native_symbol),
        GetTokenPriceTool(),
        SwapTokensTool(),
    ]
    registry = {}
    for tool in tools:
        if tool.name in registry:
            raise ValueError(f"Duplicate tool name: {tool.name}")
        registry[tool.name] = tool
    return MappingProxyType(registry)
