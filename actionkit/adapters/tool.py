"""Tool (agent-callable) surface adapter.

Maps an action onto an MCP tool:

- identifier() -> tool name
- name() -> tool title
- description() -> tool description (mandatory)
- parameters() -> input schema
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..actions.base import Action
from ..actions.capabilities import CustomizesTool, HandlesToolCall, Surface
from ..config import get_settings
from ..exceptions import ConfigurationDefect, ValidationFailure
from ..logging import get_logger
from ..naming import class_headline, class_slug
from ..responses import ToolResponse
from ..schema.tool_schema import input_schema, tool_properties
from .base import BaseAdapter

logger = get_logger(__name__)


@dataclass
class ToolRequest:
    """One tool call as received from the agent."""
    name: str
    arguments: Optional[Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.arguments or {})


class ToolAdapter(BaseAdapter):
    """Exposes an action as an agent tool."""

    surface = Surface.TOOL

    def __init__(self, action: Action):
        super().__init__(action)
        self.name = self.resolve_identity(
            CustomizesTool, "get_tool_name", action.identifier, class_slug(action)
        )
        self.title = self.resolve_identity(
            CustomizesTool, "get_tool_title", action.name, class_headline(action)
        )
        self.description = self.resolve_identity(
            CustomizesTool, "get_tool_description", action.description, None
        )
        if not self.description:
            raise ConfigurationDefect(
                f"Action [{type(action).__name__}] must define a tool description via "
                f"get_tool_description(), tool_description or a class docstring."
            )

    def schema(self) -> Dict[str, Dict[str, Any]]:
        """Input properties keyed by parameter name."""
        return tool_properties(self.action.get_parameters())

    def input_schema(self) -> Dict[str, Any]:
        return input_schema(self.action.get_parameters())

    def should_register(self) -> bool:
        if isinstance(self.action, CustomizesTool):
            return self.action.get_should_register_tool()
        return True

    def handle(self, request: ToolRequest) -> ToolResponse:
        """Execute the tool call.

        Returns:
            Pretty JSON of the result, or an error response
        """
        if isinstance(self.action, HandlesToolCall):
            return self.action.as_tool(request)

        try:
            result = self.execute(request.to_dict())
        except ValidationFailure as e:
            logger.warning(f"Validation failed for tool {self.name}: {list(e.errors)}")
            return ToolResponse.error(e.summary())
        except ConfigurationDefect:
            raise
        except Exception as e:
            logger.exception(f"Tool {self.name} failed")
            return ToolResponse.error(str(e))

        if not result:
            return ToolResponse.error(get_settings().tool_failure_message)

        return ToolResponse.json_response(result)
