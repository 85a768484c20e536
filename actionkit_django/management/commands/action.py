"""Run a registered action from the terminal.

Usage:
    python manage.py action --list
    python manage.py action reset-password
    python manage.py action reset-password user@example.com s3cret!pass s3cret!pass
"""

from django.core.management.base import CommandError
from rich.console import Console
from rich.table import Table

from actionkit.actions import Surface, get_action_registry
from actionkit.adapters.command import CommandAdapter

from ...commands import ActionCommand


class Command(ActionCommand):
    """Dispatch to any action registered for the command surface."""

    help = "Run a registered action; missing parameters are prompted for interactively"

    def add_arguments(self, parser):
        parser.add_argument(
            "identifier",
            nargs="?",
            help="Action identifier (see --list)",
        )
        super().add_arguments(parser)
        parser.add_argument(
            "--list",
            action="store_true",
            help="List the actions available as commands",
        )

    def handle(self, *args, **options):
        commands = get_action_registry().for_surface(Surface.COMMAND)

        if options["list"]:
            self.list_actions(commands)
            return

        identifier = options["identifier"]
        if not identifier:
            raise CommandError("An action identifier is required (see --list)")

        action_class = commands.get(identifier)
        if action_class is None:
            raise CommandError(f"Unknown action '{identifier}'")

        self.exit(self.run_action(action_class, options["values"]))

    def list_actions(self, commands) -> None:
        table = Table(title="Actions")
        table.add_column("Signature", style="cyan")
        table.add_column("Name")
        table.add_column("Description")

        for identifier in sorted(commands):
            adapter = CommandAdapter(commands[identifier]())
            if adapter.hidden:
                continue
            table.add_row(adapter.signature, adapter.command_name, adapter.description)

        Console().print(table)
