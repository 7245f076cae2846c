from __future__ import annotations

import logging

from ..lib.pkg import add_apt_repository, apt_install, apt_update
from ..pipeline import StepCtx
from ..state import PipelineState

logger = logging.getLogger(__name__)


class GpuDriverStep:
    step_id = "30_gpu_driver"
    reads = ()
    writes = ("gpu_configured", "reboot_required")

    def run(self, ctx: StepCtx, state: PipelineState) -> None:
        s = ctx.settings
        if not ctx.confirm("Do you want to install NVIDIA drivers (required for GPU/AI workloads)?"):
            logger.warning("Skipping NVIDIA driver installation")
            state.record("gpu_configured", False)
            state.record("reboot_required", False)
            return

        logger.info("Adding graphics drivers PPA...")
        add_apt_repository(s.nvidia_ppa, dry_run=ctx.dry_run)
        apt_update(dry_run=ctx.dry_run)

        logger.info("Installing %s (this may take a while)...", s.nvidia_driver_package)
        apt_install([s.nvidia_driver_package], dry_run=ctx.dry_run)

        state.record("gpu_configured", True)
        # The driver only loads after a restart; the summary step acts on this.
        state.record("reboot_required", True)
        logger.info("NVIDIA drivers installed")
        logger.warning("System will need to reboot to load NVIDIA drivers")
