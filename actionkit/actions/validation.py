"""Rule-token validation for action attributes.

Validates raw input against ``{attribute: [rule tokens]}`` and returns the
validated attributes, or raises ``ValidationFailure`` with per-field messages.

Rules are dispatched by naming convention to ``rule_<name>`` methods, each
returning an error message or ``None``. Hosts add rules with ``extend()``
(the Django app registers ``exists`` and ``unique``).
"""

import ipaddress
import json
import re
import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import AnyUrl, TypeAdapter, ValidationError
from pydantic.networks import validate_email

from ..exceptions import ConfigurationDefect, UnknownRuleError, ValidationFailure
from ..logging import get_logger
from .parameters import parse_rule

logger = get_logger(__name__)

# Rules that control presence handling rather than checking a value
PRESENCE_RULES = frozenset({"required", "nullable", "sometimes", "bail", "filled", "present"})
NUMERIC_RULES = frozenset({"numeric", "integer", "decimal"})

# Minimum argument count for rules that read their arguments
RULE_ARITY = {
    "min": 1, "max": 1, "size": 1, "between": 2,
    "digits": 1, "digits_between": 2,
    "in": 1, "not_in": 1, "starts_with": 1, "ends_with": 1,
    "regex": 1, "not_regex": 1, "same": 1, "different": 1,
    "before": 1, "after": 1, "before_or_equal": 1, "after_or_equal": 1,
    "accepted_if": 2, "declined_if": 2, "mimes": 1, "mimetypes": 1,
}
NUMBER_ARGUMENT_RULES = frozenset({"min", "max", "size", "between"})
INTEGER_ARGUMENT_RULES = frozenset({"digits", "digits_between", "decimal"})

_URL_ADAPTER = TypeAdapter(AnyUrl)
_TRUTHY = (True, 1, "1", "true", "on", "yes")
_FALSY = (False, 0, "0", "false", "off", "no")

RuleCallable = Callable[["RuleContext"], Optional[str]]


class RuleContext:
    """Everything a rule needs to check one attribute.

    Attributes:
        attribute: Attribute being validated
        value: Raw value for the attribute
        args: Rule arguments (``max:5`` -> ``["5"]``)
        data: Complete raw input, for cross-field rules
        rule_names: Names of every rule declared on the attribute
    """

    def __init__(
        self,
        attribute: str,
        value: Any,
        args: List[str],
        data: Mapping[str, Any],
        rule_names: Sequence[str],
    ):
        self.attribute = attribute
        self.value = value
        self.args = args
        self.data = data
        self.rule_names = rule_names

    @property
    def label(self) -> str:
        return self.attribute.replace("_", " ")

    def is_numeric(self) -> bool:
        return any(name in NUMERIC_RULES for name in self.rule_names)


def is_empty(value: Any) -> bool:
    """None, blank strings and empty collections count as missing."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, tuple, dict, set)) and len(value) == 0:
        return True
    return False


def _as_number(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


class ValidationEngine:
    """Validates raw attribute maps against rule tokens."""

    def __init__(self):
        self._extensions: Dict[str, RuleCallable] = {}

    def extend(self, name: str, rule: RuleCallable) -> None:
        """Register a host-specific rule.

        Args:
            name: Rule token name (the part before ``:``)
            rule: Callable taking a ``RuleContext`` and returning an error or None
        """
        self._extensions[name] = rule
        logger.debug(f"Registered validation rule: {name}")

    def knows(self, name: str) -> bool:
        return (
            name in PRESENCE_RULES
            or name in self._extensions
            or hasattr(self, f"rule_{name}")
        )

    def validate(
        self,
        rules: Mapping[str, Sequence[str]],
        data: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Validate ``data`` against ``rules``.

        Args:
            rules: Attribute name mapped to its rule tokens
            data: Raw input

        Returns:
            Validated attributes: every declared attribute present in ``data``

        Raises:
            UnknownRuleError: If a rule token is not registered
            ConfigurationDefect: If a rule is missing arguments or they are malformed
            ValidationFailure: If any rule is violated
        """
        parsed = {
            attribute: [parse_rule(token) for token in tokens]
            for attribute, tokens in rules.items()
        }
        for attribute, tokens in parsed.items():
            for name, args in tokens:
                if not self.knows(name):
                    raise UnknownRuleError(
                        f"Unknown validation rule '{name}' declared on '{attribute}'"
                    )
                self._check_arguments(attribute, name, args)

        errors: Dict[str, List[str]] = {}
        validated: Dict[str, Any] = {}

        for attribute, tokens in parsed.items():
            messages = self._validate_attribute(attribute, tokens, data)
            if messages:
                errors[attribute] = messages
            elif attribute in data:
                validated[attribute] = data[attribute]

        if errors:
            raise ValidationFailure(errors)

        return validated

    def _check_arguments(self, attribute: str, name: str, args: List[str]) -> None:
        if name in self._extensions:
            return
        where = f"rule '{name}' declared on '{attribute}'"
        if len(args) < RULE_ARITY.get(name, 0):
            raise ConfigurationDefect(f"Validation {where} needs {RULE_ARITY[name]} argument(s)")
        if name in NUMBER_ARGUMENT_RULES and any(_as_number(arg) is None for arg in args):
            raise ConfigurationDefect(f"Validation {where} needs numeric arguments, got {args}")
        if name in INTEGER_ARGUMENT_RULES and not all(re.fullmatch(r"\d+", arg) for arg in args):
            raise ConfigurationDefect(f"Validation {where} needs integer arguments, got {args}")

    def _validate_attribute(
        self,
        attribute: str,
        tokens: List[tuple],
        data: Mapping[str, Any],
    ) -> List[str]:
        names = [name for name, _ in tokens]
        present = attribute in data
        value = data.get(attribute)
        label = attribute.replace("_", " ")

        if "sometimes" in names and not present:
            return []

        if is_empty(value):
            if "required" in names:
                return [f"The {label} field is required."]
            if "filled" in names and present:
                return [f"The {label} field must have a value."]
            if "present" in names and not present:
                return [f"The {label} field must be present."]
            # Absent, blank or explicitly nullable values skip value rules
            if not present or value is None and "nullable" in names:
                return []
            if value is not None:
                return []

        messages = []
        for name, args in tokens:
            if name in PRESENCE_RULES:
                continue
            context = RuleContext(attribute, value, args, data, names)
            rule = self._extensions.get(name) or getattr(self, f"rule_{name}")
            message = rule(context)
            if message:
                messages.append(message)
                if "bail" in names:
                    break
        return messages

    # ------------------------------------------------------------------
    # Type rules
    # ------------------------------------------------------------------

    def rule_string(self, ctx: RuleContext) -> Optional[str]:
        if not isinstance(ctx.value, str):
            return f"The {ctx.label} field must be a string."
        return None

    def rule_integer(self, ctx: RuleContext) -> Optional[str]:
        if isinstance(ctx.value, bool):
            return f"The {ctx.label} field must be an integer."
        if isinstance(ctx.value, int):
            return None
        if isinstance(ctx.value, str) and re.fullmatch(r"\s*[-+]?\d+\s*", ctx.value):
            return None
        return f"The {ctx.label} field must be an integer."

    rule_int = rule_integer

    def rule_numeric(self, ctx: RuleContext) -> Optional[str]:
        if _as_number(ctx.value) is None:
            return f"The {ctx.label} field must be a number."
        return None

    def rule_decimal(self, ctx: RuleContext) -> Optional[str]:
        number = _as_number(ctx.value)
        if number is None:
            return f"The {ctx.label} field must be a number."
        if ctx.args:
            places = -number.as_tuple().exponent if number.as_tuple().exponent < 0 else 0
            low = int(ctx.args[0])
            high = int(ctx.args[1]) if len(ctx.args) > 1 else low
            if not low <= places <= high:
                return f"The {ctx.label} field must have {'-'.join(ctx.args)} decimal places."
        return None

    def rule_boolean(self, ctx: RuleContext) -> Optional[str]:
        if ctx.value not in _TRUTHY and ctx.value not in _FALSY:
            return f"The {ctx.label} field must be true or false."
        return None

    rule_bool = rule_boolean

    def rule_array(self, ctx: RuleContext) -> Optional[str]:
        if not isinstance(ctx.value, (list, tuple, dict)):
            return f"The {ctx.label} field must be an array."
        if ctx.args and isinstance(ctx.value, dict):
            extra = set(ctx.value) - set(ctx.args)
            if extra:
                return f"The {ctx.label} field contains unexpected keys: {', '.join(sorted(extra))}."
        return None

    def rule_json(self, ctx: RuleContext) -> Optional[str]:
        if isinstance(ctx.value, (dict, list)):
            return None
        try:
            json.loads(ctx.value)
        except (TypeError, ValueError):
            return f"The {ctx.label} field must be a valid JSON string."
        return None

    def rule_date(self, ctx: RuleContext) -> Optional[str]:
        if _as_datetime(ctx.value) is None:
            return f"The {ctx.label} field must be a valid date."
        return None

    def rule_date_format(self, ctx: RuleContext) -> Optional[str]:
        fmt = ctx.args[0] if ctx.args else "%Y-%m-%d"
        try:
            datetime.strptime(str(ctx.value), fmt)
        except ValueError:
            return f"The {ctx.label} field must match the format {fmt}."
        return None

    # ------------------------------------------------------------------
    # Format rules
    # ------------------------------------------------------------------

    def rule_email(self, ctx: RuleContext) -> Optional[str]:
        try:
            validate_email(str(ctx.value))
        except Exception:
            return f"The {ctx.label} field must be a valid email address."
        return None

    def rule_url(self, ctx: RuleContext) -> Optional[str]:
        try:
            _URL_ADAPTER.validate_python(str(ctx.value))
        except ValidationError:
            return f"The {ctx.label} field must be a valid URL."
        return None

    rule_active_url = rule_url

    def rule_uuid(self, ctx: RuleContext) -> Optional[str]:
        try:
            uuid.UUID(str(ctx.value))
        except ValueError:
            return f"The {ctx.label} field must be a valid UUID."
        return None

    def rule_ulid(self, ctx: RuleContext) -> Optional[str]:
        if not re.fullmatch(r"[0-7][0-9A-HJKMNP-TV-Z]{25}", str(ctx.value).upper()):
            return f"The {ctx.label} field must be a valid ULID."
        return None

    def rule_password(self, ctx: RuleContext) -> Optional[str]:
        # Strength policies are host concerns; hosts may extend()
        return None

    def rule_current_password(self, ctx: RuleContext) -> Optional[str]:
        # Needs the authenticated user; hosts may extend()
        return None

    def rule_ip(self, ctx: RuleContext) -> Optional[str]:
        try:
            ipaddress.ip_address(str(ctx.value))
        except ValueError:
            return f"The {ctx.label} field must be a valid IP address."
        return None

    def rule_ipv4(self, ctx: RuleContext) -> Optional[str]:
        try:
            ipaddress.IPv4Address(str(ctx.value))
        except ValueError:
            return f"The {ctx.label} field must be a valid IPv4 address."
        return None

    def rule_ipv6(self, ctx: RuleContext) -> Optional[str]:
        try:
            ipaddress.IPv6Address(str(ctx.value))
        except ValueError:
            return f"The {ctx.label} field must be a valid IPv6 address."
        return None

    def rule_mac_address(self, ctx: RuleContext) -> Optional[str]:
        if not re.fullmatch(r"([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}", str(ctx.value)):
            return f"The {ctx.label} field must be a valid MAC address."
        return None

    def rule_alpha(self, ctx: RuleContext) -> Optional[str]:
        if not str(ctx.value).isalpha():
            return f"The {ctx.label} field must only contain letters."
        return None

    def rule_alpha_num(self, ctx: RuleContext) -> Optional[str]:
        if not str(ctx.value).isalnum():
            return f"The {ctx.label} field must only contain letters and numbers."
        return None

    def rule_alpha_dash(self, ctx: RuleContext) -> Optional[str]:
        if not re.fullmatch(r"[\w-]+", str(ctx.value)):
            return f"The {ctx.label} field must only contain letters, numbers, dashes, and underscores."
        return None

    def rule_regex(self, ctx: RuleContext) -> Optional[str]:
        pattern = ctx.args[0].strip("/") if ctx.args else ""
        if not re.search(pattern, str(ctx.value)):
            return f"The {ctx.label} field format is invalid."
        return None

    def rule_not_regex(self, ctx: RuleContext) -> Optional[str]:
        pattern = ctx.args[0].strip("/") if ctx.args else ""
        if re.search(pattern, str(ctx.value)):
            return f"The {ctx.label} field format is invalid."
        return None

    def rule_starts_with(self, ctx: RuleContext) -> Optional[str]:
        if not str(ctx.value).startswith(tuple(ctx.args)):
            return f"The {ctx.label} field must start with one of the following: {', '.join(ctx.args)}."
        return None

    def rule_ends_with(self, ctx: RuleContext) -> Optional[str]:
        if not str(ctx.value).endswith(tuple(ctx.args)):
            return f"The {ctx.label} field must end with one of the following: {', '.join(ctx.args)}."
        return None

    # ------------------------------------------------------------------
    # Size and choice rules
    # ------------------------------------------------------------------

    def _size(self, ctx: RuleContext) -> Optional[Decimal]:
        value = ctx.value
        if ctx.is_numeric():
            return _as_number(value)
        if isinstance(value, (list, tuple, dict, set, str)):
            return Decimal(len(value))
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return Decimal(str(value))
        size = getattr(value, "size", None)
        if isinstance(size, int):
            # Uploaded files are measured in kilobytes
            return Decimal(size) / 1024
        return None

    def _unit(self, ctx: RuleContext) -> str:
        if ctx.is_numeric():
            return ""
        if isinstance(ctx.value, str):
            return " characters"
        if isinstance(ctx.value, (list, tuple, dict, set)):
            return " items"
        if hasattr(ctx.value, "size"):
            return " kilobytes"
        return ""

    def rule_min(self, ctx: RuleContext) -> Optional[str]:
        size = self._size(ctx)
        if size is None or size < Decimal(ctx.args[0]):
            return f"The {ctx.label} field must be at least {ctx.args[0]}{self._unit(ctx)}."
        return None

    def rule_max(self, ctx: RuleContext) -> Optional[str]:
        size = self._size(ctx)
        if size is None or size > Decimal(ctx.args[0]):
            return f"The {ctx.label} field must not be greater than {ctx.args[0]}{self._unit(ctx)}."
        return None

    def rule_between(self, ctx: RuleContext) -> Optional[str]:
        size = self._size(ctx)
        low, high = Decimal(ctx.args[0]), Decimal(ctx.args[1])
        if size is None or not low <= size <= high:
            return f"The {ctx.label} field must be between {ctx.args[0]} and {ctx.args[1]}{self._unit(ctx)}."
        return None

    def rule_size(self, ctx: RuleContext) -> Optional[str]:
        size = self._size(ctx)
        if size is None or size != Decimal(ctx.args[0]):
            return f"The {ctx.label} field must be {ctx.args[0]}{self._unit(ctx)}."
        return None

    def rule_digits(self, ctx: RuleContext) -> Optional[str]:
        text = str(ctx.value)
        if not text.isdigit() or len(text) != int(ctx.args[0]):
            return f"The {ctx.label} field must be {ctx.args[0]} digits."
        return None

    def rule_digits_between(self, ctx: RuleContext) -> Optional[str]:
        text = str(ctx.value)
        if not text.isdigit() or not int(ctx.args[0]) <= len(text) <= int(ctx.args[1]):
            return f"The {ctx.label} field must be between {ctx.args[0]} and {ctx.args[1]} digits."
        return None

    def rule_in(self, ctx: RuleContext) -> Optional[str]:
        values = ctx.value if isinstance(ctx.value, (list, tuple)) else [ctx.value]
        if any(str(value) not in ctx.args for value in values):
            return f"The selected {ctx.label} is invalid."
        return None

    def rule_not_in(self, ctx: RuleContext) -> Optional[str]:
        if str(ctx.value) in ctx.args:
            return f"The selected {ctx.label} is invalid."
        return None

    # ------------------------------------------------------------------
    # Cross-field rules
    # ------------------------------------------------------------------

    def rule_confirmed(self, ctx: RuleContext) -> Optional[str]:
        other = ctx.args[0] if ctx.args else f"{ctx.attribute}_confirmation"
        if ctx.data.get(other) != ctx.value:
            return f"The {ctx.label} field confirmation does not match."
        return None

    def rule_same(self, ctx: RuleContext) -> Optional[str]:
        other = ctx.args[0]
        if ctx.data.get(other) != ctx.value:
            return f"The {ctx.label} field must match {other.replace('_', ' ')}."
        return None

    def rule_different(self, ctx: RuleContext) -> Optional[str]:
        other = ctx.args[0]
        if ctx.data.get(other) == ctx.value:
            return f"The {ctx.label} field and {other.replace('_', ' ')} must be different."
        return None

    def _compare_dates(self, ctx: RuleContext, check: Callable[[datetime, datetime], bool], phrase: str) -> Optional[str]:
        reference = ctx.args[0]
        # The argument is either another field or a date literal
        other = _as_datetime(ctx.data.get(reference, reference))
        if reference == "today":
            other = datetime.combine(date.today(), datetime.min.time())
        current = _as_datetime(ctx.value)
        if current is None or other is None:
            return f"The {ctx.label} field must be a valid date."
        if current.tzinfo is not None and other.tzinfo is None:
            current = current.replace(tzinfo=None)
        if not check(current, other):
            return f"The {ctx.label} field must be a date {phrase} {reference}."
        return None

    def rule_before(self, ctx: RuleContext) -> Optional[str]:
        return self._compare_dates(ctx, lambda a, b: a < b, "before")

    def rule_after(self, ctx: RuleContext) -> Optional[str]:
        return self._compare_dates(ctx, lambda a, b: a > b, "after")

    def rule_before_or_equal(self, ctx: RuleContext) -> Optional[str]:
        return self._compare_dates(ctx, lambda a, b: a <= b, "before or equal to")

    def rule_after_or_equal(self, ctx: RuleContext) -> Optional[str]:
        return self._compare_dates(ctx, lambda a, b: a >= b, "after or equal to")

    # ------------------------------------------------------------------
    # Acceptance rules
    # ------------------------------------------------------------------

    def rule_accepted(self, ctx: RuleContext) -> Optional[str]:
        if ctx.value not in _TRUTHY:
            return f"The {ctx.label} field must be accepted."
        return None

    def rule_declined(self, ctx: RuleContext) -> Optional[str]:
        if ctx.value not in _FALSY:
            return f"The {ctx.label} field must be declined."
        return None

    def rule_accepted_if(self, ctx: RuleContext) -> Optional[str]:
        other, expected = ctx.args[0], ctx.args[1:]
        if str(ctx.data.get(other)) in expected and ctx.value not in _TRUTHY:
            return f"The {ctx.label} field must be accepted when {other.replace('_', ' ')} is {', '.join(expected)}."
        return None

    def rule_declined_if(self, ctx: RuleContext) -> Optional[str]:
        other, expected = ctx.args[0], ctx.args[1:]
        if str(ctx.data.get(other)) in expected and ctx.value not in _FALSY:
            return f"The {ctx.label} field must be declined when {other.replace('_', ' ')} is {', '.join(expected)}."
        return None

    # ------------------------------------------------------------------
    # Upload rules
    # ------------------------------------------------------------------

    def rule_file(self, ctx: RuleContext) -> Optional[str]:
        if not hasattr(ctx.value, "read"):
            return f"The {ctx.label} field must be a file."
        return None

    def rule_image(self, ctx: RuleContext) -> Optional[str]:
        content_type = getattr(ctx.value, "content_type", "") or ""
        if not hasattr(ctx.value, "read") or not content_type.startswith("image/"):
            return f"The {ctx.label} field must be an image."
        return None

    def rule_mimes(self, ctx: RuleContext) -> Optional[str]:
        name = getattr(ctx.value, "name", "") or ""
        extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
        if extension not in [arg.lower() for arg in ctx.args]:
            return f"The {ctx.label} field must be a file of type: {', '.join(ctx.args)}."
        return None

    def rule_mimetypes(self, ctx: RuleContext) -> Optional[str]:
        content_type = getattr(ctx.value, "content_type", None)
        if content_type not in ctx.args:
            return f"The {ctx.label} field must be a file of type: {', '.join(ctx.args)}."
        return None

    def rule_dimensions(self, ctx: RuleContext) -> Optional[str]:
        # Checking pixel dimensions needs an imaging backend; hosts may extend()
        return None


# Global engine instance
_engine: Optional[ValidationEngine] = None


def get_validation_engine() -> ValidationEngine:
    """Get the global validation engine."""
    global _engine
    if _engine is None:
        _engine = ValidationEngine()
    return _engine
