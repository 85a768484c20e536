"""MCP Server management command.

Serves a ``ToolServer`` over stdio so MCP clients can call its actions as
tools.

Usage:
    python manage.py runmcp --server workbench.mcp.PlatformServer

Client configuration (mcp.json):
    {
      "mcpServers": {
        "platform": {
          "command": "python",
          "args": ["path/to/manage.py", "runmcp"]
        }
      }
    }

IMPORTANT: All logging MUST go to stderr, not stdout!
The MCP protocol uses stdout for JSON-RPC communication.
"""

import asyncio
import logging
import sys

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils.module_loading import import_string

from actionkit.config import get_settings
from actionkit.logging import setup_logging

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Django management command to run the MCP server."""

    help = "Run an MCP tool server over stdio"

    def add_arguments(self, parser):
        parser.add_argument(
            "--server",
            type=str,
            default=None,
            help="Import path of the ToolServer class (default: ACTIONS_TOOL_SERVER)",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            help="Logging level (default: WARNING)",
        )

    def handle(self, *args, **options):
        """Handle the command execution."""
        # Set up logging first
        setup_logging(options["log_level"], use_stderr=True, json_format=get_settings().log_json)
        logging.getLogger("django").setLevel(logging.WARNING)

        server = self.load_server(options["server"])
        logger.info(f"Starting MCP Server '{server.get_name()}'")

        from actionkit.tools.mcp import serve_stdio

        try:
            asyncio.run(serve_stdio(server))
        except KeyboardInterrupt:
            logger.info("MCP Server stopped by user")
        except Exception as e:
            logger.error(f"MCP Server error: {e}")
            sys.exit(1)

    def load_server(self, path):
        path = path or getattr(settings, "ACTIONS_TOOL_SERVER", None) or get_settings().tool_server
        if not path:
            raise CommandError("No tool server configured; pass --server or set ACTIONS_TOOL_SERVER")
        try:
            server_class = import_string(path)
        except ImportError as e:
            raise CommandError(f"Cannot import tool server '{path}': {e}") from e
        return server_class()
