"""CLI Commands for ccboc."""

from ccboc.commands.create import CreateCommand
from ccboc.commands.delete import DeleteCommand
from ccboc.commands.get import GetCommand
from ccboc.commands.help import HelpCommand
from ccboc.commands.login import LoginCommand

__all__ = [
    "CreateCommand",
    "DeleteCommand",
    "GetCommand",
    "HelpCommand",
    "LoginCommand",
]
