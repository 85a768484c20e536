"""Interactive CLI prompt mapping and value casting.

``prompt_for`` decides how a missing command argument is asked for;
``ask`` drives a ``Prompter`` until it yields an acceptable value;
``cast_value`` converts the collected string into the declared type.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol

from ..actions.parameters import ParameterDescriptor
from ..naming import headline

NONE_CHOICE = "(none)"
TRUTHY = frozenset({"1", "true", "on", "yes", "y"})


class Prompter(Protocol):
    """Terminal operations the command surface needs."""

    def ask(self, question: str, default: Optional[str] = None) -> Optional[str]: ...

    def choice(self, question: str, choices: List[str]) -> str: ...

    def confirm(self, question: str, default: bool = False) -> bool: ...

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@dataclass
class PromptDescriptor:
    """How to ask for one parameter.

    Attributes:
        name: Parameter name
        kind: ``choice``, ``confirm``, ``lines`` or ``text``
        label: Question shown to the user
        required: Whether an empty answer is re-asked
        choices: Offered values for ``choice`` prompts
        default: Pre-filled answer
    """
    name: str
    kind: str
    label: str
    required: bool = False
    choices: List[str] = field(default_factory=list)
    default: Any = None


def prompt_for(parameter: ParameterDescriptor) -> PromptDescriptor:
    """Map a parameter to its prompt.

    Precedence: ``in:`` rule (choice), boolean type (confirm), array type
    (line collector), then free text.
    """
    label = parameter.description or headline(parameter.name)
    required = parameter.is_required

    choices = parameter.choices()
    if choices:
        if not required:
            choices = [NONE_CHOICE] + choices
        return PromptDescriptor(parameter.name, "choice", label, required, choices)

    if parameter.type in ("boolean", "bool"):
        return PromptDescriptor(
            parameter.name, "confirm", label, required,
            default=bool(parameter.default) if parameter.default is not None else False,
        )

    if parameter.type == "array":
        return PromptDescriptor(parameter.name, "lines", label, required)

    return PromptDescriptor(parameter.name, "text", label, required, default=parameter.default)


def ask(prompt: PromptDescriptor, prompter: Prompter) -> Any:
    """Ask until the answer satisfies the prompt's presence requirement."""
    if prompt.kind == "choice":
        value = prompter.choice(prompt.label, prompt.choices)
        return None if value == NONE_CHOICE else value

    if prompt.kind == "confirm":
        return prompter.confirm(prompt.label, prompt.default)

    if prompt.kind == "lines":
        while True:
            prompter.info(f"{prompt.label} (enter values one per line, empty line to finish)")
            values = []
            while True:
                value = prompter.ask("Value (or empty to finish)")
                if value is None or value == "":
                    break
                values.append(value)
            if values or not prompt.required:
                return values
            prompter.error("At least one value is required.")

    question = prompt.label
    default = None if prompt.default is None else str(prompt.default)
    if default is not None:
        question = f"{question} [{default}]"
    while True:
        value = prompter.ask(question, default)
        if value is None or value == "":
            value = default
        if not prompt.required or (value is not None and value != ""):
            return value
        prompter.error(f"The {prompt.name} field is required.")


def cast_value(value: Any, type_name: str) -> Any:
    """Cast a collected value to the parameter's declared type.

    ``None`` stays ``None``. Values that cannot be cast are returned as-is so
    validation can report them.
    """
    if value is None:
        return None

    if type_name in ("int", "integer"):
        try:
            return int(value)
        except (TypeError, ValueError):
            return value
    if type_name in ("float", "double"):
        try:
            return float(value)
        except (TypeError, ValueError):
            return value
    if type_name in ("bool", "boolean"):
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in TRUTHY
    if type_name == "array":
        return value if isinstance(value, list) else [value]
    return value
