"""
Tool base class.

A tool has a stable name, a description and a JSON Schema for its arguments
(advertised through tools/list, not enforced). Arguments are checked inside
each tool with the helpers below.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Optional

from mcp.types import Tool as ToolDescriptor

from ..chain import ChainClient
from ..errors import ArgumentError


class Tool(ABC):
    name: ClassVar[str]
    description: ClassVar[str]
    input_schema: ClassVar[Dict[str, Any]]

    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(name=self.name, description=self.description, inputSchema=self.input_schema)

    @abstractmethod
    async def execute(self, client: ChainClient, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Run the tool and return a JSON-ready dict, or raise a ToolError."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


def require_str(arguments: Dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if value is None:
        raise ArgumentError(f"Missing {key}")
    if not isinstance(value, str):
        raise ArgumentError(f"{key} must be a string")
    return value


def optional_str(arguments: Dict[str, Any], key: str) -> Optional[str]:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ArgumentError(f"{key} must be a string")
    return value
