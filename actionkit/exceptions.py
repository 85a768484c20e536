"""Exception types raised by actions and adapters."""

from typing import Dict, List


class ActionError(Exception):
    """Base class for actionkit errors."""
    pass


class ValidationFailure(ActionError):
    """Raised when raw input violates a declared rule.

    Attributes:
        errors: Field name mapped to its human-readable messages
    """

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        fields = ", ".join(errors) or "input"
        super().__init__(f"Validation failed for: {fields}")

    def messages(self) -> List[str]:
        """Flatten into ``field: message`` lines, one per message."""
        return [
            f"{field}: {message}"
            for field, messages in self.errors.items()
            for message in messages
        ]

    def summary(self) -> str:
        """One line per field, messages joined with commas."""
        return "\n".join(
            f"{field}: {', '.join(messages)}"
            for field, messages in self.errors.items()
        )


class BusinessFailure(ActionError):
    """Raised by an action's handle() when the business operation fails."""
    pass


class ConfigurationDefect(ActionError):
    """Raised for programming errors detected before any invocation."""
    pass


class UnknownRuleError(ConfigurationDefect):
    """Raised when a parameter declares a rule the engine does not know."""
    pass
