"""Actionkit core package.

Framework-agnostic business logic for:
- Action contract and parameter schema
- Attribute pipeline and rule-token validation
- Schema mapping (UI fields, tool schema, CLI prompts)
- Surface adapters (command, controller, UI action, tool)
- Call-site recognition that decorates actions for the surface resolving them

This package has NO dependencies on Django or any web framework.
The Django host lives in ``actionkit_django``.
"""

from .actions import (
    Action,
    ActionRegistry,
    ParameterDescriptor,
    Prefill,
    Surface,
    get_action_registry,
    register_action,
)
from .exceptions import (
    ActionError,
    BusinessFailure,
    ConfigurationDefect,
    UnknownRuleError,
    ValidationFailure,
)
from .recognition import get_action_manager, make

__version__ = "0.1.0"

__all__ = [
    "Action",
    "ActionRegistry",
    "ParameterDescriptor",
    "Prefill",
    "Surface",
    "get_action_registry",
    "register_action",
    "ActionError",
    "BusinessFailure",
    "ConfigurationDefect",
    "UnknownRuleError",
    "ValidationFailure",
    "get_action_manager",
    "make",
]
