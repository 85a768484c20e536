"""Tool input-schema mapping (JSON Schema subset used by MCP tools)."""

from typing import Any, Dict, List

from ..actions.parameters import ParameterDescriptor

JSON_TYPES: Dict[str, str] = {
    "integer": "integer",
    "int": "integer",
    "float": "number",
    "double": "number",
    "number": "number",
    "boolean": "boolean",
    "bool": "boolean",
    "array": "array",
    "object": "object",
}


def property_for(parameter: ParameterDescriptor) -> Dict[str, Any]:
    """JSON Schema property for one parameter."""
    prop: Dict[str, Any] = {
        "type": JSON_TYPES.get(parameter.type, "string"),
        "description": parameter.description,
    }
    choices = parameter.choices()
    if choices:
        prop["enum"] = choices
    return prop


def tool_properties(parameters: List[ParameterDescriptor]) -> Dict[str, Dict[str, Any]]:
    """Properties keyed by parameter name, in declaration order."""
    return {parameter.name: property_for(parameter) for parameter in parameters}


def required_parameters(parameters: List[ParameterDescriptor]) -> List[str]:
    return [parameter.name for parameter in parameters if parameter.is_required]


def input_schema(parameters: List[ParameterDescriptor]) -> Dict[str, Any]:
    """Full object schema advertised as a tool's ``inputSchema``.

    The result only depends on the declared parameters, so building it twice
    yields equal schemas.
    """
    return {
        "type": "object",
        "properties": tool_properties(parameters),
        "required": required_parameters(parameters),
    }
