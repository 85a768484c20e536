"""Management command base for actions.

Subclass ``ActionCommand`` and set ``action_class`` to expose one action as
its own management command::

    # myapp/management/commands/reset_password.py
    class Command(ActionCommand):
        action_class = ResetPassword

Positional arguments map to the action's parameters in declaration order;
missing ones are prompted for interactively.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence, Type

from django.core.management.base import BaseCommand, CommandError
from rich.console import Console

from actionkit.actions.base import Action
from actionkit.adapters.command import SUCCESS, CommandAdapter, TerminalPrompter
from actionkit.schema.prompts import Prompter

logger = logging.getLogger(__name__)


def positional_options(adapter: CommandAdapter, values: Sequence[str]) -> Mapping[str, Any]:
    """Map positional values onto parameter names.

    Raises:
        CommandError: If more values are given than there are parameters
    """
    parameters = adapter.action.get_parameters()
    if len(values) > len(parameters):
        raise CommandError(f"Too many arguments. Usage: {adapter.signature}")
    options = {parameter.name: None for parameter in parameters}
    options.update(zip((parameter.name for parameter in parameters), values))
    return options


class ActionCommand(BaseCommand):
    """Runs one action as an interactive management command."""

    action_class: Optional[Type[Action]] = None

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.action_class is not None:
            adapter = CommandAdapter(self.action_class())
            self.help = "\n".join(part for part in (adapter.description, adapter.help) if part)

    def add_arguments(self, parser):
        parser.add_argument(
            "values",
            nargs="*",
            help="Parameter values in declaration order; missing ones are prompted for",
        )

    def get_prompter(self) -> Prompter:
        return TerminalPrompter(Console())

    def run_action(
        self,
        action_class: Type[Action],
        values: List[str],
        prompter: Optional[Prompter] = None,
    ) -> int:
        """Run ``action_class`` with positional ``values`` and return the exit code."""
        adapter = CommandAdapter(action_class())
        options = positional_options(adapter, values)
        logger.info(f"Running action {adapter.signature}")
        return adapter.as_command(options, prompter or self.get_prompter())

    def handle(self, *args, **options):
        if self.action_class is None:
            raise CommandError(f"{type(self).__name__} does not define action_class")
        self.exit(self.run_action(self.action_class, options["values"]))

    def exit(self, code: int) -> None:
        if code != SUCCESS:
            raise CommandError("Action failed", returncode=code)
