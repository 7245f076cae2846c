from __future__ import annotations

import logging

from ..lib.apt_repo import fetch_text, install_signing_key, sign_source_list, write_source_list
from ..lib.command import run_cmd
from ..lib.osinfo import distribution_id
from ..lib.pkg import apt_install, apt_update
from ..lib.services import systemctl
from ..pipeline import StepCtx
from ..state import PipelineState

logger = logging.getLogger(__name__)


class GpuToolkitStep:
    step_id = "50_gpu_toolkit"
    reads = ("gpu_configured",)
    writes = ()

    def run(self, ctx: StepCtx, state: PipelineState) -> None:
        if not state.gpu_configured:
            logger.debug("NVIDIA driver not installed; skipping container toolkit")
            return

        s = ctx.settings
        dry_run = ctx.dry_run
        logger.info("Installing NVIDIA Container Toolkit...")

        distribution = distribution_id(s.os_release_path)
        install_signing_key(s.nvidia_gpg_url, s.nvidia_keyring, dry_run=dry_run)
        vendor_list = fetch_text(s.nvidia_list_url_for(distribution), dry_run=dry_run)
        write_source_list(
            s.nvidia_source_list,
            sign_source_list(vendor_list, s.nvidia_keyring),
            dry_run=dry_run,
        )

        apt_update(dry_run=dry_run)
        apt_install([s.nvidia_toolkit_package], dry_run=dry_run)

        # Registers the nvidia runtime in daemon.json; docker must restart to see it.
        run_cmd(["nvidia-ctk", "runtime", "configure", f"--runtime={s.docker_service}"], dry_run=dry_run)
        systemctl("restart", s.docker_service, dry_run=dry_run)

        logger.info("NVIDIA Container Toolkit installed (distribution=%s)", distribution)
