from __future__ import annotations

import logging

from ..console import show_disks
from ..lib.storage import (
    StorageTarget,
    StorageTargetError,
    describe_disks,
    list_disks,
    provision_storage,
)
from ..pipeline import StepCtx
from ..state import PipelineState

logger = logging.getLogger(__name__)


class StorageStep:
    """Dedicate a second disk to Docker storage.

    Destructive. Two confirmations guard it and the device name must match
    one of the disks listed beforehand. Any answer other than an explicit
    yes, or an invalid device, leaves every disk untouched.
    """

    step_id = "20_storage"
    reads = ()
    writes = ("storage_configured",)

    def run(self, ctx: StepCtx, state: PipelineState) -> None:
        s = ctx.settings

        logger.info("Scanning for available drives...")
        disks = list_disks()
        show_disks(describe_disks(disks))
        logger.warning("Your OS drive should be around %s", s.os_drive_hint)
        logger.warning("Your storage drive should be around %s", s.storage_drive_hint)

        if not ctx.confirm(
            f"Do you want to set up the second drive ({s.storage_drive_hint}) for Docker storage?"
        ):
            self._skip(state)
            return

        answer = ctx.ask(f"Enter the device name for the {s.storage_drive_hint} drive (e.g., sdb)")
        try:
            target = StorageTarget.from_user_input(answer, disks)
        except StorageTargetError as e:
            logger.error("%s", e)
            self._skip(state)
            return

        logger.warning("This will ERASE ALL DATA on %s (%s)", target.path, target.size)
        if not ctx.confirm(f"Erase {target.path} and use it for Docker storage? Are you absolutely sure?"):
            self._skip(state)
            return

        provision_storage(target, settings=s, dry_run=ctx.dry_run)
        state.record("storage_configured", True)

    def _skip(self, state: PipelineState) -> None:
        logger.warning("Skipping storage drive setup")
        state.record("storage_configured", False)
