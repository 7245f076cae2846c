from __future__ import annotations

import logging
import time

from ..console import show_section
from ..lib.command import run_cmd
from ..pipeline import StepCtx
from ..state import PipelineState

logger = logging.getLogger(__name__)


class SummaryRebootStep:
    step_id = "90_summary_reboot"
    reads = ("server_address", "storage_configured", "gpu_configured")
    writes = ()

    def run(self, ctx: StepCtx, state: PipelineState) -> None:
        s = ctx.settings
        address = state.server_address or "unknown"

        logger.info("Setup complete. Your Docker server is ready!")
        show_section(
            "Access Information",
            [
                f"CasaOS Web UI: http://{address}",
                f"Server IP: {address}",
            ],
            style="success",
        )

        if state.storage_configured:
            usage = run_cmd(["df", "-h", s.mount_point], check=False).stdout.rstrip()
            show_section(
                "Storage Configuration",
                [f"Docker storage: {s.docker_data_root}"],
                extra=usage or None,
            )

        if not state.gpu_configured:
            show_section(
                "Next Steps",
                [
                    f"1. Open http://{address} in your browser",
                    "2. Complete CasaOS initial setup",
                    "3. Install apps from the CasaOS App Store",
                ],
            )
            return

        logger.warning("IMPORTANT: System needs to reboot to load NVIDIA drivers")
        if ctx.confirm("Do you want to reboot now?"):
            logger.info("Rebooting in %g seconds...", s.reboot_delay_seconds)
            if not ctx.dry_run:
                time.sleep(s.reboot_delay_seconds)
            run_cmd(["reboot"], dry_run=ctx.dry_run)
        else:
            logger.warning("Please reboot manually to activate NVIDIA drivers")
            logger.info("After reboot, run: nvidia-smi")
