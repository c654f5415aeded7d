"""Base command class for CLI commands."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Optional

from ccboc.core.api_client import APIClient, APIResponse
from ccboc.core.config import CLIConfig, load_credential
from ccboc.core.decoder import Envelope, decode
from ccboc.core.errors import ValidationError
from ccboc.core.resources import Resource, ResourceKind
from ccboc.ui.spinners import create_spinner


class BaseCommand(ABC):
    """Base class for all CLI commands."""

    name: str = "base"
    description: str = "Base command"
    usage: str = ""
    aliases: list[str] = []

    def __init__(self, config: CLIConfig, api: Optional[APIClient] = None):
        self.config = config
        self._api = api

    @property
    def api(self) -> APIClient:
        """API client built from the stored credential on first use."""
        if self._api is None:
            credential = load_credential(self.config.config_path)
            self._api = APIClient(
                credential,
                verify_tls=self.config.verify_tls,
                timeout=self.config.timeout,
            )
        return self._api

    def close(self) -> None:
        if self._api is not None:
            self._api.close()

    @abstractmethod
    def execute(self, args: list[str]) -> bool:
        """
        Execute the command.

        Args:
            args: Command arguments

        Returns:
            True if successful, False otherwise
        """
        pass

    def fetch(
        self,
        call: Callable[[], APIResponse],
        kind: ResourceKind,
        shape: Envelope = Envelope.WRAPPED,
        message: str = "Fetching...",
    ) -> Resource:
        """Run one API call and decode its body as `kind`."""
        with create_spinner(message, style="loading"):
            response = call()
        response.raise_for_envelope()
        return decode(response.body, kind, shape)

    def parse_flags(self, args: list[str]) -> tuple[dict[str, Any], list[str]]:
        """Parse command-line flags from arguments."""
        flags = {}
        remaining = []

        i = 0
        while i < len(args):
            arg = args[i]
            if arg.startswith("--"):
                key = arg[2:]
                if "=" in key:
                    key, value = key.split("=", 1)
                    flags[key] = value
                elif i + 1 < len(args) and not args[i + 1].startswith("-"):
                    flags[key] = args[i + 1]
                    i += 1
                else:
                    flags[key] = True
            elif arg.startswith("-") and len(arg) == 2:
                key = arg[1]
                if i + 1 < len(args) and not args[i + 1].startswith("-"):
                    flags[key] = args[i + 1]
                    i += 1
                else:
                    flags[key] = True
            else:
                remaining.append(arg)
            i += 1

        return flags, remaining

    @staticmethod
    def string_flag(flags: dict[str, Any], *names: str) -> Optional[str]:
        """First non-empty value among the flag names, or None."""
        for name in names:
            value = flags.get(name)
            if value is True:
                raise ValidationError(f"--{name} needs a value")
            if value:
                return str(value)
        return None

    @classmethod
    def float_flag(cls, flags: dict[str, Any], *names: str) -> Optional[float]:
        value = cls.string_flag(flags, *names)
        if value is None:
            return None
        try:
            return float(value)
        except ValueError as e:
            raise ValidationError(f"--{names[0]} must be a number, got {value!r}") from e

    @staticmethod
    def require_arg(remaining: list[str], what: str) -> str:
        """The single positional argument naming the target object."""
        if not remaining:
            raise ValidationError(f"{what} not specified")
        return remaining[-1]
