"""Action contract, parameter schema and validation.

Provides:
- Action base class and surface capabilities
- ParameterDescriptor / Prefill schema types
- Rule-token ValidationEngine
- ActionRegistry for explicit surface wiring
"""

from .base import Action
from .capabilities import (
    ALL_SURFACES,
    AdminResponses,
    CustomizesAdminAction,
    CustomizesCommand,
    CustomizesController,
    CustomizesTool,
    HandlesAdminAction,
    HandlesCommand,
    HandlesRequest,
    HandlesToolCall,
    Surface,
    ToolResponses,
)
from .parameters import ParameterDescriptor, Prefill, is_entity_type
from .registry import ActionRegistry, get_action_registry, register_action
from .serialization import EntityResolver, SerializesEntities, set_entity_resolver
from .validation import RuleContext, ValidationEngine, get_validation_engine

__all__ = [
    # Contract
    "Action",
    "ParameterDescriptor",
    "Prefill",
    "is_entity_type",
    # Capabilities
    "Surface",
    "ALL_SURFACES",
    "CustomizesAdminAction",
    "CustomizesCommand",
    "CustomizesController",
    "CustomizesTool",
    "HandlesAdminAction",
    "HandlesCommand",
    "HandlesRequest",
    "HandlesToolCall",
    "AdminResponses",
    "ToolResponses",
    # Registry
    "ActionRegistry",
    "get_action_registry",
    "register_action",
    # Serialization
    "EntityResolver",
    "SerializesEntities",
    "set_entity_resolver",
    # Validation
    "RuleContext",
    "ValidationEngine",
    "get_validation_engine",
]
