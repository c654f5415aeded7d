"""Main CLI entry point - dispatch one command and exit."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from ccboc import __version__
from ccboc.commands.base import BaseCommand
from ccboc.commands.create import CreateCommand
from ccboc.commands.delete import DeleteCommand
from ccboc.commands.get import GetCommand
from ccboc.commands.help import HelpCommand
from ccboc.commands.login import LoginCommand
from ccboc.core.api_client import APIClient
from ccboc.core.config import CLIConfig
from ccboc.core.errors import ApplicationError, CCBOCError
from ccboc.core.logging import get_logger, setup_logging
from ccboc.ui.console import err_console, print_error
from ccboc.ui.phase_watch import WatchKey, read_watch_key

logger = get_logger(__name__)


def report_error(error: CCBOCError) -> None:
    """Print a failed command's error on stderr."""
    logger.debug("command failed: %s", error.to_dict())
    if isinstance(error, ApplicationError):
        print_error(f"{error.message} (status_code={error.status_code})", title="Server error")
    else:
        print_error(error.message, title=type(error).__name__)


class CCBOCCLI:
    """Command registry for one process."""

    def __init__(
        self,
        config: CLIConfig,
        api: Optional[APIClient] = None,
        read_key: Callable[[], WatchKey] = read_watch_key,
    ):
        self.config = config

        commands: list[BaseCommand] = [
            LoginCommand(config),
            GetCommand(config, api, read_key=read_key),
            CreateCommand(config, api),
            DeleteCommand(config, api),
        ]
        help_command = HelpCommand(config, commands)

        # Command registry, aliases included
        self.commands: dict[str, BaseCommand] = {}
        for command in [*commands, help_command]:
            self.commands[command.name] = command
            for alias in command.aliases:
                self.commands[alias] = command

    def run(self, cmd_name: str, args: list[str]) -> int:
        """Execute a command and return the process exit status."""
        command = self.commands.get(cmd_name.lower())
        if command is None:
            print_error(f"Unknown command: {cmd_name}")
            err_console.print("[muted]Use 'ccboc help' to see available commands[/muted]")
            return 1

        try:
            return 0 if command.execute(args) else 1
        except CCBOCError as e:
            report_error(e)
            return 1
        except KeyboardInterrupt:
            err_console.print("\n[warning]Interrupted[/warning]")
            return 1
        finally:
            command.close()


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ccboc",
        description="ccboc - CLI for the calculation API server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Run 'ccboc help' for the list of commands and examples.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to the credential file (default: ~/.config/ccboc/config)",
    )
    parser.add_argument(
        "--verify-tls",
        action="store_true",
        default=None,
        help="Verify the API server's TLS certificate (off by default)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (default: transport default)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"ccboc {__version__}",
    )
    parser.add_argument(
        "command",
        nargs="?",
        help="Command to execute (login, get, create, delete, help)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    parser = create_parser()

    # Use parse_known_args to allow command-specific flags to pass through
    args, remaining = parser.parse_known_args(argv)

    try:
        config = CLIConfig.from_env()
    except CCBOCError as e:
        report_error(e)
        sys.exit(1)

    if args.config is not None:
        config.config_path = args.config.expanduser()
    if args.verify_tls:
        config.verify_tls = True
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.debug:
        config.log_level = "DEBUG"

    setup_logging(config.log_level)

    cli = CCBOCCLI(config)
    sys.exit(cli.run(args.command or "help", remaining))


if __name__ == "__main__":
    main()
