"""Error types raised by tools and the chain client."""


class ToolError(Exception):
    """Base class for failures that abort a tool invocation."""

    kind = "tool_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ArgumentError(ToolError):
    """Malformed or missing tool argument."""

    kind = "argument"


class ChainCallError(ToolError):
    """A remote call to the Ethereum node failed."""

    kind = "chain_call"


class DecodeError(ToolError):
    """Return data from a contract call could not be ABI-decoded."""

    kind = "decode"


class NotFoundError(ToolError):
    """The requested on-chain object (pool, price) does not exist."""

    kind = "not_found"


class ConfigError(Exception):
    """Invalid or missing process configuration."""
