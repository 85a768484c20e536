"""Attribute pipeline: fill raw input, derive rules, validate."""

from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from ..config import get_settings
from ..exceptions import ValidationFailure
from ..logging import get_logger
from .validation import ValidationEngine, get_validation_engine

logger = get_logger(__name__)

# Keys injected by adapters rather than supplied by the caller
CONTEXT_KEYS: FrozenSet[str] = frozenset({"model", "models"})


class WithAttributes:
    """Mixin holding the per-invocation attribute state of an action.

    Classes using it provide ``get_parameters()`` returning descriptors.
    """

    validation_engine: Optional[ValidationEngine] = None

    def fill(self, raw: Mapping[str, Any]) -> None:
        """Store raw input on the instance for the current invocation."""
        self._attributes = dict(raw)

    def get_attributes(self) -> Dict[str, Any]:
        return dict(getattr(self, "_attributes", {}))

    def clear_attributes(self) -> None:
        self._attributes = {}

    def rules(self) -> Dict[str, List[str]]:
        """Map each declared parameter name to its rule tokens."""
        return {parameter.name: list(parameter.rules) for parameter in self.get_parameters()}

    def get_validation_engine(self) -> ValidationEngine:
        return self.validation_engine or get_validation_engine()

    def validate_attributes(self) -> Dict[str, Any]:
        """Validate the filled attributes.

        Returns:
            Validated attributes, with defaults applied to absent optional
            parameters and undeclared keys passed through

        Raises:
            ValidationFailure: If any declared rule is violated
        """
        raw = self.get_attributes()
        parameters = self.get_parameters()
        declared = {parameter.name for parameter in parameters}

        undeclared = [key for key in raw if key not in declared and key not in CONTEXT_KEYS]
        if undeclared and get_settings().strict_attributes:
            raise ValidationFailure({
                key: [f"The {key.replace('_', ' ')} field is not permitted."]
                for key in undeclared
            })

        validated = self.get_validation_engine().validate(self.rules(), raw)

        for parameter in parameters:
            if (
                parameter.name not in raw
                and not parameter.is_required
                and parameter.default is not None
            ):
                validated[parameter.name] = parameter.default

        for key, value in raw.items():
            if key not in declared:
                validated[key] = value

        return validated
