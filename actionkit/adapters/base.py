"""Shared adapter template and identity resolution."""

from typing import Any, Callable, Dict, Mapping, Optional, Type

from ..actions.base import Action
from ..actions.capabilities import Surface
from ..logging import get_logger

logger = get_logger(__name__)


class BaseAdapter:
    """Wraps exactly one action instance for one surface.

    Attribute lookups the adapter does not answer itself are delegated to the
    wrapped action, so a decorated instance still exposes the action's own
    methods.
    """

    surface: Optional[Surface] = None

    def __init__(self, action: Action):
        self.action = action

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes missing on the adapter
        if name == "action":
            raise AttributeError(name)
        return getattr(self.action, name)

    def resolve_identity(
        self,
        capability: Type,
        getter: str,
        accessor: Callable[[], Optional[str]],
        structural: Optional[str],
    ) -> Optional[str]:
        """Resolve one identity attribute.

        Order: the surface override exposed through ``capability``, then the
        action's own accessor, then the structural class-name default.
        """
        if isinstance(self.action, capability):
            value = getattr(self.action, getter)()
            if value:
                return value
        value = accessor()
        if value:
            return value
        return structural

    def execute(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        """Run fill, validate and handle on the wrapped action.

        Raises:
            ValidationFailure: If the input violates a declared rule
        """
        logger.debug(f"Executing {self.action.identifier()} via {self.surface}")
        try:
            self.action.fill(raw)
            validated = self.action.validate_attributes()
            return self.action.handle(validated)
        finally:
            self.action.clear_attributes()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.action!r}>"
