"""
JSON-RPC server over stdio.

Reads one request per line from stdin, dispatches tools/list and tools/call to
the tool registry and writes one response line to stdout. Requests are handled
strictly one at a time. Logs go to stderr so stdout carries only protocol
traffic.
"""

import asyncio
import json
import sys
from typing import Mapping, Optional, TextIO

from mcp.server.fastmcp.utilities.logging import configure_logging, get_logger
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, TextContent
from pydantic import ValidationError

from .chain import ChainClient, EthereumClient
from .config import Settings
from .errors import ConfigError, ToolError
from .models import JsonRpcRequest, JsonRpcResponse
from .tools import Tool, build_registry

logger = get_logger(__name__)

METHOD_TOOLS_LIST = "tools/list"
METHOD_TOOLS_CALL = "tools/call"
MAX_NESTING_DEPTH = 128


# --- Parsing ---

def _reject_constant(token: str) -> None:
    raise ValueError(f"Non-standard JSON constant: {token}")


def nesting_depth(line: str) -> int:
    """Deepest array/object nesting in `line`, ignoring brackets inside strings."""
    depth = deepest = 0
    in_string = escaped = False
    for char in line:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char in "[{":
            depth += 1
            deepest = max(deepest, depth)
        elif char in "]}":
            depth -= 1
    return deepest


def parse_request(line: str) -> Optional[JsonRpcRequest]:
    """Parse one input line; returns None (after logging) if it is not a request."""
    depth = nesting_depth(line)
    if depth > MAX_NESTING_DEPTH:
        logger.error(f"Failed to parse JSON-RPC request: nesting depth {depth} exceeds {MAX_NESTING_DEPTH}")
        return None
    try:
        payload = json.loads(line, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.error(f"Failed to parse JSON-RPC request: {e}")
        return None
    try:
        return JsonRpcRequest.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Failed to parse JSON-RPC request: {e.error_count()} validation error(s): {e}")
        return None


# --- Handlers ---

def handle_tools_list(request: JsonRpcRequest, tools: Mapping[str, Tool]) -> JsonRpcResponse:
    descriptors = [
        tool.descriptor().model_dump(include={"name", "description", "inputSchema"})
        for tool in tools.values()
    ]
    return JsonRpcResponse.success(request.id, {"tools": descriptors})


async def handle_tools_call(
    request: JsonRpcRequest, client: ChainClient, tools: Mapping[str, Tool]
) -> JsonRpcResponse:
    params = request.params
    if params is None:
        return JsonRpcResponse.failure(request.id, INVALID_PARAMS, "Missing params")

    tool_name = params.get("name") if isinstance(params, dict) else None
    if not isinstance(tool_name, str):
        return JsonRpcResponse.failure(request.id, INVALID_PARAMS, "Missing 'name' parameter")

    tool = tools.get(tool_name)
    if tool is None:
        return JsonRpcResponse.failure(request.id, METHOD_NOT_FOUND, f"Tool not found: {tool_name}")

    arguments = params.get("arguments")
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        return JsonRpcResponse.failure(request.id, INVALID_PARAMS, "'arguments' must be an object")

    logger.info(f"Calling tool {tool_name}")
    try:
        result = await tool.execute(client, arguments)
    except ToolError as e:
        logger.warning(f"Tool {tool_name} failed ({e.kind}): {e}")
        return JsonRpcResponse.failure(
            request.id, INTERNAL_ERROR, f"Tool execution failed: {e}", {"kind": e.kind}
        )
    except Exception as e:
        logger.exception(f"Unexpected error in tool {tool_name}: {e}")
        return JsonRpcResponse.failure(
            request.id, INTERNAL_ERROR, f"Tool execution failed: {e}", {"kind": "internal"}
        )

    # Text rendering for MCP clients plus the raw structure for agents
    text = TextContent(type="text", text=json.dumps(result, indent=2))
    return JsonRpcResponse.success(
        request.id,
        {"content": [text.model_dump(include={"type", "text"})], "data": result},
    )


async def handle_request(
    request: JsonRpcRequest, client: ChainClient, tools: Mapping[str, Tool]
) -> JsonRpcResponse:
    if request.method == METHOD_TOOLS_LIST:
        return handle_tools_list(request, tools)
    if request.method == METHOD_TOOLS_CALL:
        return await handle_tools_call(request, client, tools)
    return JsonRpcResponse.failure(request.id, METHOD_NOT_FOUND, "Method not found")


# --- Stdio loop ---

def write_response(writer: TextIO, response: JsonRpcResponse) -> None:
    writer.write(json.dumps(response.to_wire()) + "\n")
    writer.flush()


async def serve(
    client: ChainClient,
    tools: Mapping[str, Tool],
    reader: TextIO = sys.stdin,
    writer: TextIO = sys.stdout,
) -> None:
    """Process requests until EOF on `reader`."""
    logger.info("MCP Server Ready. Waiting for JSON-RPC requests on stdin...")
    for line in reader:
        if not line.strip():
            continue
        logger.debug(f"Received request: {line.rstrip()}")

        request = parse_request(line)
        if request is None:
            continue

        response = await handle_request(request, client, tools)
        write_response(writer, response)
    logger.info("Input closed, shutting down")


async def run(settings: Settings) -> None:
    tools = build_registry(native_symbol=settings.native_symbol)
    logger.info(f"Loaded {len(tools)} tools: {', '.join(tools)}")
    async with EthereumClient(settings.rpc_url, settings.private_key, timeout=settings.rpc_timeout) as client:
        logger.info(f"Using RPC endpoint {settings.rpc_url}, signer {client.signer_address}")
        await serve(client, tools)


def main() -> None:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        configure_logging("INFO")
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    configure_logging(settings.log_level)
    logger.info("Starting Ethereum Trading MCP Server...")
    try:
        asyncio.run(run(settings))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
