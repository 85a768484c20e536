"""UI field mapping.

Turns parameter descriptors into framework-neutral field descriptors that a
UI host renders (the Django host renders them as ``django.forms`` fields).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..actions.parameters import ParameterDescriptor, Prefill, parse_rule
from ..config import get_settings
from ..exceptions import ConfigurationDefect
from ..logging import get_logger
from ..naming import field_label

logger = get_logger(__name__)

# Rule name -> field kind, consulted in rule order
RULE_KINDS: Dict[str, str] = {
    "file": "file",
    "mimes": "file",
    "mimetypes": "file",
    "image": "image",
    "dimensions": "image",
    "date": "date",
    "date_format": "date",
    "before": "date",
    "after": "date",
    "before_or_equal": "date",
    "after_or_equal": "date",
    "email": "email",
    "url": "url",
    "active_url": "url",
    "ip": "text",
    "ipv4": "text",
    "ipv6": "text",
    "mac_address": "text",
    "uuid": "text",
    "ulid": "text",
    "password": "password",
    "current_password": "password",
    "json": "code",
    "array": "keyvalue",
    "numeric": "number",
    "integer": "number",
    "digits": "number",
    "digits_between": "number",
    "decimal": "number",
    "boolean": "boolean",
    "accepted": "boolean",
    "accepted_if": "boolean",
    "declined": "boolean",
    "declined_if": "boolean",
}

# Type tag -> field kind when no rule decides
TYPE_KINDS: Dict[str, str] = {
    "integer": "number",
    "int": "number",
    "float": "number",
    "double": "number",
    "number": "number",
    "boolean": "boolean",
    "bool": "boolean",
    "text": "textarea",
    "markdown": "textarea",
    "date": "date",
    "datetime": "datetime",
    "file": "file",
    "image": "image",
    "password": "password",
    "url": "url",
    "color": "color",
    "json": "code",
    "code": "code",
    "keyvalue": "keyvalue",
}

DECIMAL_STEP = "0.01"
TEXTAREA_THRESHOLD = 255


@dataclass
class FieldDescriptor:
    """Framework-neutral description of one UI form field.

    Attributes:
        name: Parameter name the submitted value is stored under
        kind: Field kind (text, textarea, number, select, email, ...)
        label: Human-readable label
        help_text: Parameter description
        rules: Raw rule tokens, for client-side hints
        required: Whether ``required`` is among the rules
        nullable: Whether ``nullable`` is among the rules
        default: Prefilled value
        options: Value to label mapping for select fields
        multiple: Whether a select accepts several values
        step: Step for decimal number fields
        language: Editor language for code fields
    """
    name: str
    kind: str
    label: str
    help_text: str = ""
    rules: List[str] = field(default_factory=list)
    required: bool = False
    nullable: bool = False
    default: Any = None
    options: Dict[Any, Any] = field(default_factory=dict)
    multiple: bool = False
    step: Optional[str] = None
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "kind": self.kind,
            "label": self.label,
            "help_text": self.help_text,
            "rules": list(self.rules),
            "required": self.required,
            "nullable": self.nullable,
            "default": self.default,
            "options": dict(self.options),
            "multiple": self.multiple,
            "step": self.step,
            "language": self.language,
        }


def _kind_from_rules(parameter: ParameterDescriptor) -> Optional[Dict[str, Any]]:
    for rule in parameter.rules:
        name, _ = parse_rule(rule)
        kind = RULE_KINDS.get(name)
        if kind is None:
            continue
        extra: Dict[str, Any] = {"kind": kind}
        if name == "decimal":
            extra["step"] = DECIMAL_STEP
        elif name == "json":
            extra["language"] = "json"
        return extra
    return None


def _kind_from_type(parameter: ParameterDescriptor) -> Dict[str, Any]:
    kind = TYPE_KINDS.get(parameter.type)
    if kind is None:
        max_length = parameter.max_length()
        if max_length is not None and max_length > TEXTAREA_THRESHOLD:
            return {"kind": "textarea"}
        return {"kind": "text"}

    extra: Dict[str, Any] = {"kind": kind}
    if parameter.type in ("float", "double", "number"):
        extra["step"] = DECIMAL_STEP
    elif parameter.type == "json":
        extra["language"] = "json"
    return extra


def field_for(
    parameter: ParameterDescriptor,
    prefill: Optional[Mapping[str, Prefill]] = None,
) -> FieldDescriptor:
    """Map one parameter to a UI field descriptor.

    Precedence: option-style types (array, entity) first, then the first rule
    that implies a kind, then the declared type.

    Raises:
        ConfigurationDefect: If an option-style parameter has no prefill entry
            and strict prefill is enabled
    """
    prefill = prefill or {}
    entry = prefill.get(parameter.name)

    if parameter.type == "array" or parameter.is_entity:
        if entry is None:
            if get_settings().strict_prefill:
                raise ConfigurationDefect(
                    f"Parameter '{parameter.name}' of type '{parameter.type}' needs prefill options"
                )
            logger.warning(
                f"No prefill options for '{parameter.name}' ({parameter.type}), rendering an empty select"
            )
        extra = {
            "kind": "select",
            "options": dict(entry.options) if entry else {},
            "multiple": parameter.type == "array",
        }
    else:
        extra = _kind_from_rules(parameter) or _kind_from_type(parameter)

    return FieldDescriptor(
        name=parameter.name,
        label=field_label(parameter.name),
        help_text=parameter.description,
        rules=list(parameter.rules),
        required=parameter.is_required,
        nullable=parameter.is_nullable,
        default=entry.default if entry else None,
        **extra,
    )


def fields_for(
    parameters: List[ParameterDescriptor],
    prefill: Optional[Mapping[str, Prefill]] = None,
) -> List[FieldDescriptor]:
    """Map every parameter, preserving declaration order."""
    return [field_for(parameter, prefill) for parameter in parameters]
