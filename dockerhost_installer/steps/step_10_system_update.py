from __future__ import annotations

import logging

from ..lib.pkg import apt_update, apt_upgrade
from ..pipeline import StepCtx
from ..state import PipelineState

logger = logging.getLogger(__name__)


class SystemUpdateStep:
    step_id = "10_system_update"
    reads = ()
    writes = ()

    def run(self, ctx: StepCtx, state: PipelineState) -> None:
        logger.info("Updating system packages...")
        apt_update(dry_run=ctx.dry_run)
        apt_upgrade(dry_run=ctx.dry_run)
        logger.info("System updated")
