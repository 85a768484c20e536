"""Command surface adapter.

Maps an action onto a terminal command:

- identifier() -> signature (``reset-password {email?} {password?}``)
- name() -> command name shown in listings
- description() -> command description
- parameters() -> help text and interactive prompts for missing arguments
"""

from typing import Any, Dict, List, Mapping, Optional

from prompt_toolkit import prompt
from rich.console import Console

from ..actions.base import Action
from ..actions.capabilities import CustomizesCommand, HandlesCommand, Surface
from ..exceptions import ConfigurationDefect, ValidationFailure
from ..logging import get_logger
from ..naming import class_headline, class_slug
from ..schema.prompts import Prompter, ask, cast_value, prompt_for
from .base import BaseAdapter

logger = get_logger(__name__)

SUCCESS = 0
FAILURE = 1


class TerminalPrompter:
    """Prompter backed by prompt_toolkit input and rich output."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def ask(self, question: str, default: Optional[str] = None) -> Optional[str]:
        answer = prompt(f"{question}: ", default=default or "")
        return answer.strip()

    def choice(self, question: str, choices: List[str]) -> str:
        self.console.print(f"[bold]{question}[/bold]")
        for index, choice in enumerate(choices):
            self.console.print(f"  [cyan][{index}][/cyan] {choice}")

        while True:
            answer = prompt("> ").strip()
            if answer in choices:
                return answer
            if answer.isdigit() and int(answer) < len(choices):
                return choices[int(answer)]
            self.console.print(f"[red]Value \"{answer}\" is invalid[/red]")

    def confirm(self, question: str, default: bool = False) -> bool:
        hint = "[Y/n]" if default else "[y/N]"
        answer = prompt(f"{question} {hint}: ").strip().lower()
        if not answer:
            return default
        return answer in ("y", "yes")

    def info(self, message: str) -> None:
        self.console.print(f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]{message}[/red]")


class CommandAdapter(BaseAdapter):
    """Exposes an action as an interactive terminal command."""

    surface = Surface.COMMAND

    def __init__(self, action: Action):
        super().__init__(action)
        self.command_name = self.resolve_identity(
            CustomizesCommand, "get_command_name", action.name, class_headline(action)
        )
        self.description = self.resolve_identity(
            CustomizesCommand, "get_command_description", action.description, ""
        )
        self.hidden = isinstance(action, CustomizesCommand) and action.is_command_hidden()

    @property
    def signature(self) -> str:
        """Command signature with one optional argument per parameter."""
        arguments = "".join(f" {{{parameter.name}?}}" for parameter in self.action.get_parameters())
        return f"{self.action.identifier() or class_slug(self.action)}{arguments}"

    @property
    def help(self) -> str:
        """Explicit help text, or a listing generated from parameters."""
        if isinstance(self.action, CustomizesCommand):
            explicit = self.action.get_command_help()
            if explicit is not None:
                return explicit

        parameters = self.action.get_parameters()
        if not parameters:
            return ""

        lines = ["Parameters:"]
        for parameter in parameters:
            presence = "(required)" if parameter.is_required else "(optional)"
            lines.append(f"  {parameter.name}: {parameter.description} {presence}")
        return "\n".join(lines) + "\n"

    def collect_arguments(self, options: Mapping[str, Any], prompter: Prompter) -> Dict[str, Any]:
        """Read each parameter from ``options``, prompting for missing ones."""
        collected = {}
        for parameter in self.action.get_parameters():
            value = options.get(parameter.name)
            if value is None:
                value = ask(prompt_for(parameter), prompter)
            collected[parameter.name] = cast_value(value, parameter.type)
        return collected

    def as_command(self, options: Mapping[str, Any], prompter: Optional[Prompter] = None) -> int:
        """Run the action as a command.

        Args:
            options: Argument values keyed by parameter name (None if missing)
            prompter: Terminal used for prompts and output

        Returns:
            Exit code (0 on success, 1 on failure)
        """
        prompter = prompter or TerminalPrompter()

        if isinstance(self.action, HandlesCommand):
            return self.action.as_command(self, options)

        try:
            arguments = self.collect_arguments(options, prompter)
            self.execute(arguments)
            prompter.info("Done.")
            return SUCCESS
        except ValidationFailure as e:
            for line in e.messages():
                prompter.error(line)
            return FAILURE
        except ConfigurationDefect:
            raise
        except Exception as e:
            logger.debug(f"Command {self.action.identifier()} failed: {e}")
            prompter.error(str(e))
            return FAILURE
