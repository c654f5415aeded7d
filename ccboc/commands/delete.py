"""Delete command - remove calculation bulks and worker pools."""

from __future__ import annotations

from ccboc.commands.base import BaseCommand
from ccboc.core.decoder import decode_status
from ccboc.core.errors import ApplicationError, ValidationError
from ccboc.core.logging import get_logger
from ccboc.ui.spinners import create_spinner

logger = get_logger(__name__)


class DeleteCommand(BaseCommand):
    """Delete a bulk or worker pool by name."""

    name = "delete"
    description = "Delete an object - bulk/workerpool"
    usage = "delete <bulk NAME | workerpool NAME>"
    aliases = ["del"]

    def execute(self, args: list[str]) -> bool:
        _, remaining = self.parse_flags(args)
        noun = remaining[0] if remaining else None

        if noun == "bulk":
            name = self.require_arg(remaining[1:], "bulk name")
            label, call = "calculation bulk", self.api.delete_bulk
        elif noun == "workerpool":
            name = self.require_arg(remaining[1:], "workerpool name")
            label, call = "workerpool", self.api.delete_workerpool
        else:
            raise ValidationError(f"usage: ccboc {self.usage}")

        with create_spinner(f"Deleting {label} {name}...", style="loading"):
            response = call(name)
        response.raise_for_envelope()

        # The reply repeats the outcome in its own status_code field
        status = decode_status(response.body)
        if not status.ok:
            raise ApplicationError(
                status.message or f"Couldn't delete the {label} named {name}",
                status_code=status.status_code,
            )

        logger.info("Deleted %s %s successfully", label, name)
        return True
