"""Declarative parameter schema for actions.

A parameter is described by its name, description, semantic type, rule
tokens and an optional default. Actions may declare parameters either as
``ParameterDescriptor`` instances or as plain dicts with the same keys.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from ..exceptions import ConfigurationDefect

# Semantic types understood by the schema mappers. Anything else containing a
# dot (``app_label.Model``) names an entity whose options come from prefill().
PRIMITIVE_TYPES = frozenset({
    "string", "str",
    "integer", "int",
    "float", "double", "number", "decimal",
    "boolean", "bool",
    "array", "object",
    "date", "datetime",
    "file", "image",
    "password", "url", "color",
    "json", "code",
    "text", "markdown",
    "keyvalue",
})


class ParameterDescriptor(BaseModel):
    """Declarative description of one action input.

    Attributes:
        name: Raw-input key and validated-output key
        description: Help text, prompt label and tool-schema description
        type: Semantic type tag or fully-qualified entity name
        rules: Ordered validation rule tokens (e.g. ``required``, ``in:a,b``)
        default: Value used when the parameter is optional and absent
    """

    name: str = Field(min_length=1)
    description: str = ""
    type: str = "string"
    rules: List[str] = Field(default_factory=list)
    default: Any = None

    model_config = {"frozen": True}

    @field_validator("rules", mode="before")
    @classmethod
    def split_rule_string(cls, value: Any) -> Any:
        """Accept ``"required|email"`` as well as a list of tokens."""
        if isinstance(value, str):
            return [token for token in value.split("|") if token]
        return value

    @property
    def is_required(self) -> bool:
        return "required" in self.rules

    @property
    def is_nullable(self) -> bool:
        return "nullable" in self.rules

    @property
    def is_entity(self) -> bool:
        return is_entity_type(self.type)

    def choices(self) -> List[str]:
        """Values listed by the first ``in:`` rule, or an empty list."""
        return choices_from_rules(self.rules)

    def max_length(self) -> Optional[int]:
        """Numeric argument of the first ``max:`` rule, if any."""
        for rule in self.rules:
            name, args = parse_rule(rule)
            if name == "max" and args:
                try:
                    return int(float(args[0]))
                except ValueError:
                    return None
        return None


class Prefill(BaseModel):
    """Default value and option set offered for one parameter."""

    default: Any = None
    options: Dict[Any, Any] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def options_from_list(cls, value: Any) -> Any:
        """A plain list of options maps each value to itself as label."""
        if value is None:
            return {}
        if isinstance(value, (list, tuple)):
            return {option: option for option in value}
        return value


ParameterLike = Union[ParameterDescriptor, Mapping[str, Any]]


def is_entity_type(type_name: str) -> bool:
    """Whether a type tag names an entity (``app_label.Model``)."""
    return type_name not in PRIMITIVE_TYPES and "." in type_name


def parse_rule(rule: str) -> Tuple[str, List[str]]:
    """Split ``"between:1,10"`` into ``("between", ["1", "10"])``."""
    name, _, arguments = rule.partition(":")
    if not arguments:
        return name.strip(), []
    if name.strip() == "regex":
        # Patterns may contain commas
        return "regex", [arguments]
    return name.strip(), [arg.strip() for arg in arguments.split(",")]


def choices_from_rules(rules: Iterable[str]) -> List[str]:
    """Extract choices from the first ``in:`` rule (e.g. ``in:a,b,c``)."""
    for rule in rules:
        if isinstance(rule, str) and rule.startswith("in:"):
            return rule[3:].split(",")
    return []


def normalize_parameters(parameters: Iterable[ParameterLike]) -> List[ParameterDescriptor]:
    """Coerce declared parameters into descriptors and enforce unique names.

    Raises:
        ConfigurationDefect: If a name is declared twice or a dict is malformed
    """
    descriptors: List[ParameterDescriptor] = []
    seen = set()

    for parameter in parameters:
        if isinstance(parameter, ParameterDescriptor):
            descriptor = parameter
        else:
            try:
                descriptor = ParameterDescriptor.model_validate(dict(parameter))
            except Exception as e:
                raise ConfigurationDefect(f"Invalid parameter declaration {parameter!r}: {e}") from e

        if descriptor.name in seen:
            raise ConfigurationDefect(f"Parameter '{descriptor.name}' is declared more than once")
        seen.add(descriptor.name)
        descriptors.append(descriptor)

    return descriptors


def normalize_prefill(prefill: Optional[Mapping[str, Any]]) -> Dict[str, Prefill]:
    """Coerce an action's prefill() result into ``Prefill`` entries."""
    if not prefill:
        return {}

    normalized = {}
    for name, entry in prefill.items():
        if isinstance(entry, Prefill):
            normalized[name] = entry
        elif isinstance(entry, Mapping):
            normalized[name] = Prefill.model_validate(dict(entry))
        else:
            # A bare value is shorthand for a default
            normalized[name] = Prefill(default=entry)
    return normalized
