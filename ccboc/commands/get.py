"""Get command - fetch and display calculations, bulks, worker pools and results."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

from rich.markup import escape

from ccboc.commands.base import BaseCommand
from ccboc.core.api_client import APIClient
from ccboc.core.config import CLIConfig, results_file_path, write_results_file
from ccboc.core.errors import ValidationError
from ccboc.core.logging import get_logger
from ccboc.core.resources import ResourceKind
from ccboc.ui.console import print_success
from ccboc.ui.phase_watch import PhaseWatch, WatchKey, read_watch_key
from ccboc.ui.spinners import create_spinner
from ccboc.ui.tables import render

logger = get_logger(__name__)


class GetCommand(BaseCommand):
    """Fetch an object from the API server and print it."""

    name = "get"
    description = "Get an object - calculation/bulk/workerpool/results/phase"
    usage = "get <calculation ID|calculations|bulk ID|bulks|workerpool NAME|workerpools|results|phase ID>"
    aliases = ["g"]

    def __init__(
        self,
        config: CLIConfig,
        api: Optional[APIClient] = None,
        read_key: Callable[[], WatchKey] = read_watch_key,
    ):
        super().__init__(config, api)
        self.read_key = read_key
        self.subcommands: dict[str, Callable[[dict[str, Any], list[str]], bool]] = {
            "calculation": self._calculation,
            "calc": self._calculation,
            "calculations": self._calculations,
            "calcs": self._calculations,
            "bulk": self._bulk,
            "bulks": self._bulks,
            "workerpool": self._workerpool,
            "workerpools": self._workerpools,
            "results": self._results,
            "res": self._results,
            "phase": self._phase,
        }

    def execute(self, args: list[str]) -> bool:
        flags, remaining = self.parse_flags(args)
        if not remaining or remaining[0] not in self.subcommands:
            raise ValidationError(f"usage: ccboc {self.usage}")
        return self.subcommands[remaining[0]](flags, remaining[1:])

    def _calculation(self, flags: dict[str, Any], rest: list[str]) -> bool:
        calc_id = self.require_arg(rest, "calculation id")
        render(self.fetch(lambda: self.api.get_calculation(calc_id), ResourceKind.CALCULATION))
        return True

    def _calculations(self, flags: dict[str, Any], rest: list[str]) -> bool:
        render(self.fetch(self.api.list_calculations, ResourceKind.CALCULATION_LIST))
        return True

    def _bulk(self, flags: dict[str, Any], rest: list[str]) -> bool:
        bulk_id = self.require_arg(rest, "bulk id")
        render(self.fetch(lambda: self.api.get_bulk(bulk_id), ResourceKind.CALCULATION_BULK))
        return True

    def _bulks(self, flags: dict[str, Any], rest: list[str]) -> bool:
        render(self.fetch(self.api.list_bulks, ResourceKind.CALCULATION_BULK_LIST))
        return True

    def _workerpool(self, flags: dict[str, Any], rest: list[str]) -> bool:
        name = self.require_arg(rest, "workerpool name")
        render(self.fetch(lambda: self.api.get_workerpool(name), ResourceKind.WORKER_POOL))
        return True

    def _workerpools(self, flags: dict[str, Any], rest: list[str]) -> bool:
        render(self.fetch(self.api.list_workerpools, ResourceKind.WORKER_POOL_LIST))
        return True

    def _results(self, flags: dict[str, Any], rest: list[str]) -> bool:
        """Download a results archive, by --teff/--logG or by calculation id."""
        teff = self.float_flag(flags, "teff")
        logg = self.float_flag(flags, "logG", "logg")
        download_dir = self.string_flag(flags, "results-download-path")
        directory = Path(download_dir).expanduser() if download_dir else self.config.results_dir

        if (teff is None) != (logg is None):
            raise ValidationError("--teff and --logG must be specified together")
        if directory is not None and not directory.is_dir():
            raise ValidationError(f"couldn't stat path {directory}: not an existing directory")

        by_params = teff is not None and logg is not None
        calc_id = None if by_params else self.require_arg(rest, "calculation id (or --teff and --logG)")

        with create_spinner("Downloading results...", style="download"):
            if by_params:
                response = self.api.results_by_params(teff, logg)
            else:
                response = self.api.results_by_id(calc_id)
        response.raise_for_envelope()

        path = results_file_path(
            response.download_name(),
            download_dir=directory,
            config_path=self.config.config_path,
        )
        write_results_file(response.body, path)

        logger.info("The calculations were downloaded into: %s", path)
        print_success(f"Results saved to [path]{escape(str(path))}[/path]")
        return True

    def _phase(self, flags: dict[str, Any], rest: list[str]) -> bool:
        bulk_id = self.require_arg(rest, "bulk id")
        watch = PhaseWatch(
            fetch=lambda: self.fetch(lambda: self.api.get_bulk(bulk_id), ResourceKind.CALCULATION_BULK),
            read_key=self.read_key,
        )
        watch.run()
        return True
