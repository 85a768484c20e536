"""Tool server definitions.

A ``ToolServer`` names the actions it exposes; a ``ServerContext`` resolves
them into tool adapters through the action manager, which recognizes the
``resolve_primitives`` call site and decorates each action as a tool.

Example::

    class PlatformServer(ToolServer):
        name = "Platform Server"
        version = "1.0.0"
        instructions = "Tools for managing platform users."
        tools = [ResetPassword]
"""

from typing import Dict, List, Optional, Sequence, Type

from ..actions.base import Action
from ..adapters.tool import ToolAdapter
from ..config import get_settings
from ..logging import get_logger
from ..recognition.manager import ActionManager, get_action_manager
from ..recognition.recognizers import ResolvesPrimitives

logger = get_logger(__name__)


class ToolServer:
    """Declarative tool server: identity, instructions and tool classes."""

    name: str = ""
    version: str = ""
    instructions: str = ""
    tools: Sequence[Type[Action]] = ()

    def get_name(self) -> str:
        return self.name or get_settings().mcp_server_name

    def get_version(self) -> str:
        return self.version or get_settings().mcp_server_version

    def get_instructions(self) -> Optional[str]:
        return self.instructions or None


class ServerContext(ResolvesPrimitives):
    """Serving context for one ``ToolServer``."""

    def __init__(self, server: ToolServer, manager: Optional[ActionManager] = None):
        self.server = server
        self.manager = manager or get_action_manager()

    def resolve_primitives(self) -> List[object]:
        """Build one instance per declared tool class."""
        primitives = []
        # Each resolution must run directly in this frame
        for tool_class in self.server.tools:
            primitives.append(self.manager.make(tool_class))
        return primitives

    def tools(self) -> Dict[str, ToolAdapter]:
        """Registered tool adapters keyed by tool name."""
        tools: Dict[str, ToolAdapter] = {}
        for primitive in self.resolve_primitives():
            if not isinstance(primitive, ToolAdapter):
                logger.debug(f"Skipping {primitive!r}: not exposed as a tool")
                continue
            if not primitive.should_register():
                logger.debug(f"Skipping tool {primitive.name}: registration disabled")
                continue
            if primitive.name in tools:
                logger.warning(f"Duplicate tool name '{primitive.name}', keeping the first")
                continue
            tools[primitive.name] = primitive
        return tools
