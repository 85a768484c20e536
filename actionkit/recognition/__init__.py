"""Call-site recognition: decorate a plain action for the surface resolving it."""

from .frames import Backtrace, BacktraceFrame, find_declaring_class
from .manager import (
    ActionManager,
    configure_action_manager,
    default_recognizers,
    get_action_manager,
    make,
)
from .recognizers import (
    Recognizer,
    ResolvesActions,
    ResolvesPrimitives,
    ToolRecognizer,
    UIActionRecognizer,
)

__all__ = [
    "Backtrace",
    "BacktraceFrame",
    "find_declaring_class",
    "ActionManager",
    "configure_action_manager",
    "default_recognizers",
    "get_action_manager",
    "make",
    "Recognizer",
    "ResolvesActions",
    "ResolvesPrimitives",
    "ToolRecognizer",
    "UIActionRecognizer",
]
