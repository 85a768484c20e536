"""Action registry for explicitly wired surfaces.

Hosts register action classes once at startup; the command and controller
surfaces look them up by identifier, filtered by the surfaces each action
declares.
"""

from typing import Dict, List, Optional, Type

from ..exceptions import ConfigurationDefect
from ..logging import get_logger
from .base import Action
from .capabilities import Surface

logger = get_logger(__name__)


class ActionRegistry:
    """Central registry of action classes keyed by identifier."""

    def __init__(self):
        """Initialize the action registry."""
        self._actions: Dict[str, Type[Action]] = {}

    def register(self, action_class: Type[Action]) -> Type[Action]:
        """Register an action class.

        The class is not constructed; the identifier is read from a bare
        instance.

        Returns:
            The class, so this can be used as a decorator

        Raises:
            ConfigurationDefect: If another class already holds the identifier
        """
        if not (isinstance(action_class, type) and issubclass(action_class, Action)):
            raise TypeError(f"{action_class!r} is not an Action subclass")

        # identifier() must not depend on constructor state
        identifier = action_class.__new__(action_class).identifier()
        existing = self._actions.get(identifier)
        if existing is not None and existing is not action_class:
            raise ConfigurationDefect(f"Action '{identifier}' is already registered")

        self._actions[identifier] = action_class
        logger.debug(f"Registered action: {identifier}")
        return action_class

    def get(self, identifier: str) -> Optional[Type[Action]]:
        """Get an action class by identifier."""
        return self._actions.get(identifier)

    def list_actions(self) -> List[Type[Action]]:
        """Get all registered action classes."""
        return list(self._actions.values())

    def for_surface(self, surface: Surface) -> Dict[str, Type[Action]]:
        """Registered actions that participate in ``surface``."""
        return {
            identifier: action_class
            for identifier, action_class in self._actions.items()
            if surface in action_class.surfaces
        }

    def clear(self) -> None:
        self._actions.clear()


# Global registry instance
_registry: Optional[ActionRegistry] = None


def get_action_registry() -> ActionRegistry:
    """Get the global action registry."""
    global _registry
    if _registry is None:
        _registry = ActionRegistry()
    return _registry


def register_action(action_class: Type[Action]) -> Type[Action]:
    """Class decorator registering an action with the global registry."""
    return get_action_registry().register(action_class)
