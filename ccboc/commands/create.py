"""Create command - submit calculations, bulks and worker pools."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.markup import escape

from ccboc.commands.base import BaseCommand
from ccboc.core.decoder import Envelope, decode_bulk_file
from ccboc.core.errors import DecodeError, ValidationError
from ccboc.core.logging import get_logger
from ccboc.core.resources import CalculationBulk, ResourceKind
from ccboc.ui.console import print_success

logger = get_logger(__name__)


class CreateCommand(BaseCommand):
    """Create a calculation, calculation bulk or worker pool on the server."""

    name = "create"
    description = "Create a calculation/bulk/workerpool object in the cluster"
    usage = "create <calculation --teff F --logG F | bulk --bulk-file PATH | workerpool --name NAME>"
    aliases = ["c"]

    def execute(self, args: list[str]) -> bool:
        flags, remaining = self.parse_flags(args)
        noun = remaining[0] if remaining else None

        # `ccboc create --teff=10000 --logG=4.0` creates a calculation
        if noun is None and ("teff" in flags or "logG" in flags):
            noun = "calculation"

        if noun in ("calculation", "calc"):
            return self._calculation(flags)
        if noun == "bulk":
            return self._bulk(flags)
        if noun == "workerpool":
            return self._workerpool(flags)
        raise ValidationError(f"usage: ccboc {self.usage}")

    def _calculation(self, flags: dict[str, Any]) -> bool:
        teff = self.float_flag(flags, "teff")
        logg = self.float_flag(flags, "logG", "logg")
        if teff is None or logg is None:
            raise ValidationError("--teff and --logG must be specified together")

        # This endpoint answers with the bare calculation, without a data envelope
        calc = self.fetch(
            lambda: self.api.create_calculation(teff, logg),
            ResourceKind.CALCULATION,
            shape=Envelope.DIRECT,
            message="Creating calculation...",
        )
        print_success(f"Calculation created: [secondary]{escape(calc.name)}[/secondary]")
        return True

    def _bulk(self, flags: dict[str, Any]) -> bool:
        bulk_file = self.string_flag(flags, "bulk-file")
        if bulk_file is None:
            raise ValidationError("file to create a calculation bulk not specified (--bulk-file)")

        path = Path(bulk_file).expanduser()
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise ValidationError(f"Couldn't open the input .json file {path}: {e}") from e

        try:
            local = decode_bulk_file(raw)
        except DecodeError as e:
            raise ValidationError(
                f"Couldn't unmarshal the contents of {path} as a calculation bulk",
                details=e.details,
            ) from e
        logger.debug("submitting bulk %r with %d calculations", local.name, len(local.calculations))

        created: CalculationBulk = self.fetch(
            lambda: self.api.create_bulk(raw),
            ResourceKind.CALCULATION_BULK,
            message="Creating calculation bulk...",
        )
        print_success(
            f"Calculation bulk [secondary]{escape(created.name)}[/secondary] created "
            f"with {len(created.calculations)} calculations"
        )
        return True

    def _workerpool(self, flags: dict[str, Any]) -> bool:
        name = self.string_flag(flags, "name")
        if name is None:
            raise ValidationError("name of the workerpool was not specified (--name)")

        pool = self.fetch(
            lambda: self.api.create_workerpool(name),
            ResourceKind.WORKER_POOL,
            message="Creating workerpool...",
        )
        logger.info("Created workerpool %s successfully", pool.name)
        return True
