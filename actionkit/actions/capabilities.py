"""Surface tags and optional capability interfaces.

An action opts into surface-specific behaviour by inheriting one of these
mixins. Adapters check capabilities with ``isinstance``, never by probing
for method names.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence

from ..responses import ToolResponse, UIResponse


class Surface(str, Enum):
    """Invocation surfaces an action can be exposed through."""
    COMMAND = "command"
    CONTROLLER = "controller"
    UI_ACTION = "ui_action"
    TOOL = "tool"


ALL_SURFACES = frozenset(Surface)


# ----------------------------------------------------------------------
# Identity overrides
# ----------------------------------------------------------------------

class CustomizesCommand:
    """Override how an action presents itself as a terminal command."""

    command_name: Optional[str] = None
    command_description: Optional[str] = None
    command_help: Optional[str] = None
    command_hidden: bool = False

    def get_command_name(self) -> Optional[str]:
        return self.command_name

    def get_command_description(self) -> Optional[str]:
        return self.command_description

    def get_command_help(self) -> Optional[str]:
        return self.command_help

    def is_command_hidden(self) -> bool:
        return self.command_hidden


class CustomizesController:
    """Override the middleware applied to an action's HTTP endpoint.

    Middleware entries are view decorators, applied in list order.
    """

    controller_middleware: Sequence[Callable] = ()

    def get_controller_middleware(self) -> List[Callable]:
        return list(self.controller_middleware)


class CustomizesAdminAction:
    """Override how an action presents itself in the admin panel."""

    action_title: Optional[str] = None
    action_uri_key: Optional[str] = None

    def get_action_title(self) -> Optional[str]:
        return self.action_title

    def get_action_uri_key(self) -> Optional[str]:
        return self.action_uri_key


class CustomizesTool:
    """Override how an action presents itself as an agent tool."""

    tool_name: Optional[str] = None
    tool_title: Optional[str] = None
    tool_description: Optional[str] = None
    should_register_tool: bool = True

    def get_tool_name(self) -> Optional[str]:
        return self.tool_name

    def get_tool_title(self) -> Optional[str]:
        return self.tool_title

    def get_tool_description(self) -> Optional[str]:
        return self.tool_description

    def get_should_register_tool(self) -> bool:
        return self.should_register_tool


# ----------------------------------------------------------------------
# Handling overrides
# ----------------------------------------------------------------------

class HandlesCommand(ABC):
    """Take over command execution instead of the shared pipeline."""

    @abstractmethod
    def as_command(self, command: Any, options: Mapping[str, Any]) -> int:
        """Run as a command and return the exit code."""


class HandlesRequest(ABC):
    """Take over HTTP handling instead of the shared pipeline."""

    @abstractmethod
    def as_controller(self, request: Any) -> Any:
        """Handle the request and return a host response."""


class HandlesAdminAction(ABC):
    """Take over admin-action handling instead of the shared pipeline."""

    @abstractmethod
    def as_admin_action(self, fields: Mapping[str, Any], models: Sequence[Any]) -> UIResponse:
        """Handle the submitted fields for the selected records."""


class HandlesToolCall(ABC):
    """Take over tool-call handling instead of the shared pipeline."""

    @abstractmethod
    def as_tool(self, request: Any) -> ToolResponse:
        """Handle the tool call and return a tool response."""


# ----------------------------------------------------------------------
# Response helpers
# ----------------------------------------------------------------------

class ToolResponses:
    """Shortcuts for building tool responses inside ``as_tool``."""

    def text(self, text: str) -> ToolResponse:
        return ToolResponse.text_response(text)

    def json(self, data: Any) -> ToolResponse:
        return ToolResponse.json_response(data)

    def error(self, message: str) -> ToolResponse:
        return ToolResponse.error(message)

    def resource(self, uri: str, text: str, mime_type: Optional[str] = None) -> ToolResponse:
        return ToolResponse.resource(uri, text, mime_type)

    def image(self, data: str, mime_type: str = "image/png") -> ToolResponse:
        return ToolResponse.image(data, mime_type)


class AdminResponses:
    """Shortcuts for building UI responses inside ``as_admin_action``."""

    def message(self, text: str) -> UIResponse:
        return UIResponse.message(text)

    def danger(self, text: str) -> UIResponse:
        return UIResponse.danger(text)

    def redirect(self, url: str) -> UIResponse:
        return UIResponse.redirect(url)

    def download(self, filename: str, url: str) -> UIResponse:
        return UIResponse.download(filename, url)
