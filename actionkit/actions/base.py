"""Base class for all actions.

An action is a stateless business-logic unit with an identity, a declared
parameter schema and a single execution entry point. The same class can be
exposed as a terminal command, an HTTP endpoint, an admin-panel action and
an agent tool without any per-surface code.

Example::

    class UpdateUserStatus(Action):
        \"\"\"Updates the status of one or more users.\"\"\"

        def parameters(self):
            return [
                {
                    "name": "status",
                    "description": "The new status for the user",
                    "type": "string",
                    "rules": ["required", "string", "in:active,inactive,pending"],
                },
                {
                    "name": "reason",
                    "description": "Optional reason for the status change",
                    "rules": ["nullable", "string", "max:500"],
                },
            ]

        def handle(self, attributes):
            ...
            return {"success": True}
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List, Mapping

from ..naming import class_headline, class_slug
from .attributes import WithAttributes
from .capabilities import ALL_SURFACES, Surface
from .parameters import ParameterDescriptor, ParameterLike, Prefill, normalize_parameters, normalize_prefill
from .serialization import SerializesEntities


class Action(WithAttributes, SerializesEntities, ABC):
    """Abstract base class for all actions.

    Subclasses must implement :meth:`parameters` and :meth:`handle`.
    Identity defaults are derived from the class: ``ResetPassword`` becomes
    identifier ``reset-password``, name ``Reset Password`` and the first
    paragraph of the class docstring as description.
    """

    #: Surfaces this action participates in
    surfaces: FrozenSet[Surface] = ALL_SURFACES

    def __init__(self):
        self._attributes: Dict[str, Any] = {}

    def identifier(self) -> str:
        """Unique slug used as command name, tool name and UI URI key."""
        return class_slug(self)

    def name(self) -> str:
        """Human-readable action name."""
        return class_headline(self)

    def description(self) -> str:
        """What the action does, shown as help text and tool description."""
        doc = type(self).__doc__
        if not doc:
            return ""
        return inspect.cleandoc(doc).split("\n\n", 1)[0].replace("\n", " ").strip()

    @abstractmethod
    def parameters(self) -> List[ParameterLike]:
        """Declare the action's inputs.

        Each entry is a ``ParameterDescriptor`` or a dict with ``name``,
        ``description``, ``type``, ``rules`` and optional ``default``.
        """

    @abstractmethod
    def handle(self, attributes: Dict[str, Any]) -> Dict[str, Any]:
        """Execute the action with validated attributes.

        Args:
            attributes: Validated attributes for this invocation

        Returns:
            Result mapping, by convention including a success flag
        """

    def prefill(self) -> Mapping[str, Any]:
        """Default value and options per parameter name."""
        return {}

    def get_parameters(self) -> List[ParameterDescriptor]:
        """Normalized parameter descriptors, names guaranteed unique."""
        return normalize_parameters(self.parameters())

    def get_prefill(self) -> Dict[str, Prefill]:
        return normalize_prefill(self.prefill())

    def supports(self, surface: Surface) -> bool:
        return surface in self.surfaces

    def run(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        """Fill, validate and handle in one call.

        Raises:
            ValidationFailure: If the input violates a declared rule
        """
        try:
            self.fill(raw)
            validated = self.validate_attributes()
            return self.handle(validated)
        finally:
            self.clear_attributes()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.identifier()}>"
