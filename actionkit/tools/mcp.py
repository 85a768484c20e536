"""MCP binding for tool servers.

Builds a low-level ``mcp.server.Server`` whose ``list_tools`` and
``call_tool`` handlers are backed by a ``ServerContext``. Tool adapters run
synchronously, so calls are dispatched with ``sync_to_async`` to keep ORM
access out of the event loop.

IMPORTANT: when serving over stdio, all logging MUST go to stderr.
"""

from typing import Any, Dict, List, Optional

from asgiref.sync import sync_to_async
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool as MCPTool

from ..adapters.tool import ToolAdapter, ToolRequest
from ..logging import get_logger
from .server import ServerContext, ToolServer

logger = get_logger(__name__)


class ToolNotFoundError(Exception):
    """Raised when a call names a tool the server does not expose."""
    pass


class ToolCallError(Exception):
    """Raised to report a tool error response to the MCP client."""
    pass


def describe_tool(tool: ToolAdapter) -> MCPTool:
    """MCP tool listing entry for an adapter."""
    return MCPTool(
        name=tool.name,
        title=tool.title,
        description=tool.description,
        inputSchema=tool.input_schema(),
    )


def call(context: ServerContext, name: str, arguments: Optional[Dict[str, Any]]) -> List[Any]:
    """Execute one tool call synchronously and return MCP content.

    Raises:
        ToolNotFoundError: If no tool is registered under ``name``
        ToolCallError: If the tool returned an error response
    """
    tools = context.tools()
    tool = tools.get(name)
    if tool is None:
        raise ToolNotFoundError(f"Tool '{name}' not found")

    response = tool.handle(ToolRequest(name=name, arguments=arguments or {}))
    if response.is_error:
        raise ToolCallError(response.text)
    return response.to_content()


def build_mcp_server(server: ToolServer, context: Optional[ServerContext] = None) -> Server:
    """Create an MCP server exposing ``server``'s tools."""
    context = context or ServerContext(server)
    mcp = Server(
        server.get_name(),
        version=server.get_version(),
        instructions=server.get_instructions(),
    )

    @mcp.list_tools()
    async def list_tools() -> List[MCPTool]:
        """Return the registered tools."""
        tools = await sync_to_async(context.tools)()
        return [describe_tool(tool) for tool in tools.values()]

    # Arguments are validated by the action's own rules
    @mcp.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[Any]:
        """Execute a tool and return its content."""
        logger.info(f"Tool call: {name}")
        try:
            return await sync_to_async(call)(context, name, arguments)
        except (ToolNotFoundError, ToolCallError) as e:
            logger.warning(f"Tool call failed: {name} - {e}")
            raise

    return mcp


async def serve_stdio(server: ToolServer) -> None:
    """Run ``server`` over stdio until the client disconnects."""
    mcp = build_mcp_server(server)
    logger.info(f"MCP Server '{server.get_name()}' ready, waiting for connections...")

    async with stdio_server() as (read_stream, write_stream):
        await mcp.run(
            read_stream,
            write_stream,
            mcp.create_initialization_options(),
        )
