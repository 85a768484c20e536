"""Schema mappings derived from an action's parameters.

- UI field descriptors (``fields``)
- Tool input schema (``tool_schema``)
- CLI prompt descriptors and value casting (``prompts``)
"""

from .fields import FieldDescriptor, field_for, fields_for
from .prompts import NONE_CHOICE, PromptDescriptor, Prompter, ask, cast_value, prompt_for
from .tool_schema import input_schema, property_for, tool_properties

__all__ = [
    "FieldDescriptor",
    "field_for",
    "fields_for",
    "NONE_CHOICE",
    "PromptDescriptor",
    "Prompter",
    "ask",
    "cast_value",
    "prompt_for",
    "input_schema",
    "property_for",
    "tool_properties",
]
