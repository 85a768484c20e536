"""Surface adapters wrapping one action instance each."""

from .base import BaseAdapter
from .command import CommandAdapter, TerminalPrompter
from .controller import ControllerAdapter, ControllerResult
from .tool import ToolAdapter, ToolRequest
from .ui import UIActionAdapter, inject_models

__all__ = [
    "BaseAdapter",
    "CommandAdapter",
    "TerminalPrompter",
    "ControllerAdapter",
    "ControllerResult",
    "ToolAdapter",
    "ToolRequest",
    "UIActionAdapter",
    "inject_models",
]
