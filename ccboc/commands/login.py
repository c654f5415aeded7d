"""Login command - store the API server URL and token."""

from __future__ import annotations

from rich.markup import escape

from ccboc.commands.base import BaseCommand
from ccboc.core.config import Credential, save_credential
from ccboc.core.errors import ValidationError
from ccboc.ui.console import print_success


class LoginCommand(BaseCommand):
    """Validate the credential and write the configuration file."""

    name = "login"
    description = "Login to the API server and generate the configuration file"
    usage = "login --url URL --token TOKEN"
    aliases = ["l"]

    def execute(self, args: list[str]) -> bool:
        flags, _ = self.parse_flags(args)
        url = self.string_flag(flags, "url", "u")
        token = self.string_flag(flags, "token", "t")

        if not url or not token:
            raise ValidationError("--token and --url must be specified together")

        path = save_credential(Credential.create(url, token), self.config.config_path)
        print_success(f"Configuration file generated at [path]{escape(str(path))}[/path]")
        return True
