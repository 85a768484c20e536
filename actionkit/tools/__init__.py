"""Tool servers and their MCP binding."""

from .server import ServerContext, ToolServer

__all__ = ["ServerContext", "ToolServer"]
