"""Recognizers that decide, from a backtrace, which surface resolves an action."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ..actions.base import Action
from ..actions.capabilities import Surface
from ..logging import get_logger
from .frames import Backtrace

logger = get_logger(__name__)

Decorator = Callable[[Action], Any]


class ResolvesActions:
    """Capability of a UI resource that lists actions from ``actions()``."""


class ResolvesPrimitives:
    """Capability of a tool-serving context that builds tools in ``resolve_primitives()``."""


class Recognizer(ABC):
    """Classifies a backtrace as one surface and decorates for it."""

    surface: Surface

    def __init__(self, decorator: Optional[Decorator] = None):
        self.decorator = decorator or self.default_decorator()

    @abstractmethod
    def default_decorator(self) -> Decorator:
        """Adapter class (or factory) used when none is configured."""

    @abstractmethod
    def matches(self, backtrace: Backtrace) -> bool:
        """Whether the backtrace shows this recognizer's call site."""

    def classify(self, backtrace: Backtrace) -> Optional[Surface]:
        return self.surface if self.matches(backtrace) else None

    def decorate(self, instance: Action) -> Any:
        return self.decorator(instance)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.surface.value}>"


class ToolRecognizer(Recognizer):
    """Matches when a tool-serving context resolves its primitives.

    The frame right after resolution must be ``resolve_primitives`` running
    on a ``ResolvesPrimitives`` receiver.
    """

    surface = Surface.TOOL

    def default_decorator(self) -> Decorator:
        from ..adapters.tool import ToolAdapter
        return ToolAdapter

    def matches(self, backtrace: Backtrace) -> bool:
        callers = backtrace.callers()
        if not callers:
            return False
        frame = callers[0]
        return frame.function == "resolve_primitives" and isinstance(frame.receiver, ResolvesPrimitives)


class UIActionRecognizer(Recognizer):
    """Matches when a UI resource lists actions from its ``actions()`` method.

    Walking outward, the first frame whose receiver is a ``ResolvesActions``
    resource and whose concrete class descends from the frame's declaring
    class decides: it must be ``actions``. Any other resource method in
    between (a helper gathering actions for a template, say) rejects the
    match.
    """

    surface = Surface.UI_ACTION

    def default_decorator(self) -> Decorator:
        from ..adapters.ui import UIActionAdapter
        return UIActionAdapter

    def matches(self, backtrace: Backtrace) -> bool:
        for frame in backtrace.callers():
            receiver = frame.receiver
            if receiver is None or frame.declaring_class is None:
                continue
            if not isinstance(receiver, ResolvesActions):
                continue
            if not issubclass(type(receiver), frame.declaring_class):
                continue
            return frame.function == "actions"
        return False
