from __future__ import annotations

import logging

from ..lib.pkg import apt_install
from ..pipeline import StepCtx
from ..state import PipelineState

logger = logging.getLogger(__name__)


class OptionalToolsStep:
    step_id = "70_optional_tools"
    reads = ()
    writes = ()

    def run(self, ctx: StepCtx, state: PipelineState) -> None:
        tools = ctx.settings.extra_tools
        if not ctx.confirm(f"Do you want to install additional useful tools ({', '.join(tools[:2])}, etc.)?"):
            logger.info("Skipping additional tools")
            return
        logger.info("Installing additional tools...")
        apt_install(list(tools), dry_run=ctx.dry_run)
        logger.info("Additional tools installed: %s", " ".join(tools))
