"""Help command - display CLI help and examples."""

from __future__ import annotations

from typing import Optional

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ccboc.commands.base import BaseCommand
from ccboc.core.config import CLIConfig
from ccboc.ui.console import console

EXAMPLES = [
    ("ccboc login --url https://api.example.org --token <token>", "Store the API URL and token"),
    ("ccboc get calculation calc-1881i9dh5zvnllip", "Get the calculation with that id"),
    ("ccboc get calculations", "Get all active calculations"),
    ("ccboc get bulks", "Get all calculation bulks"),
    ("ccboc get bulk bulk-2bw55pr5p37dasdl", "Get one calculation bulk"),
    ("ccboc get phase bulk-2bw55pr5p37dasdl", "Watch the phases of a bulk"),
    ("ccboc get workerpools", "Get all the workerpools"),
    ("ccboc get results --teff=10000 --logG=4.0", "Download results by parameters"),
    ("ccboc create calculation --teff=10000 --logG=4.0", "Create a calculation"),
    ("ccboc create bulk --bulk-file=bulk.json", "Create a calculation bulk from a file"),
    ("ccboc create workerpool --name=vega-project", "Create a workerpool"),
    ("ccboc delete bulk bulk-vega-project", "Delete a calculation bulk"),
    ("ccboc delete workerpool workerpool-vega-project", "Delete a workerpool"),
]


class HelpCommand(BaseCommand):
    """Display help information."""

    name = "help"
    description = "Show help information"
    usage = "help [command]"
    aliases = ["h"]

    def __init__(self, config: CLIConfig, commands: Optional[list[BaseCommand]] = None):
        super().__init__(config)
        self.commands = commands or []

    def execute(self, args: list[str]) -> bool:
        """Display help."""
        _, remaining = self.parse_flags(args)
        if remaining:
            return self._show_command_help(remaining[0].lower())
        return self._show_general_help()

    def _show_general_help(self) -> bool:
        table = Table(show_header=True, header_style="primary", border_style="muted", padding=(0, 2))
        table.add_column("Command", style="command", width=10)
        table.add_column("Aliases", style="muted", width=8)
        table.add_column("Usage", style="text")

        for cmd in [*self.commands, self]:
            table.add_row(cmd.name, ", ".join(cmd.aliases), escape(cmd.usage))

        console.print(Panel(
            table,
            title="[primary]Available Commands[/primary]",
            border_style="primary",
            padding=(1, 2),
        ))

        examples = Table(show_header=False, box=None, padding=(0, 2))
        examples.add_column("Example", style="command")
        examples.add_column("Description", style="muted")
        for example, text in EXAMPLES:
            examples.add_row(escape(example), text)
        console.print(examples)
        return True

    def _show_command_help(self, cmd_name: str) -> bool:
        """Show detailed help for a specific command."""
        cmd = next(
            (c for c in [*self.commands, self] if cmd_name == c.name or cmd_name in c.aliases),
            None,
        )
        if cmd is None:
            console.print(f"[error]Unknown command: {escape(cmd_name)}[/error]")
            console.print("[muted]Use 'ccboc help' to see available commands[/muted]")
            return False

        text = Text()
        text.append(f"{cmd.description}\n\n", style="text")
        text.append("Usage:\n", style="muted")
        text.append(f"  ccboc {cmd.usage}\n", style="command")
        if cmd.aliases:
            text.append("\nAliases:\n", style="muted")
            text.append(f"  {', '.join(cmd.aliases)}", style="tertiary")

        console.print(Panel(text, title=f"[primary]{cmd.name}[/primary]", border_style="primary", padding=(1, 2)))
        return True
