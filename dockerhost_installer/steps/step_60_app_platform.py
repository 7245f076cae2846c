from __future__ import annotations

import logging
import os
import tempfile

from ..lib.command import run_cmd
from ..pipeline import StepCtx
from ..state import PipelineState

logger = logging.getLogger(__name__)


class AppPlatformStep:
    """Install CasaOS with its upstream installer script."""

    step_id = "60_app_platform"
    reads = ()
    writes = ()

    def run(self, ctx: StepCtx, state: PipelineState) -> None:
        url = ctx.settings.casaos_installer_url
        logger.info("Installing CasaOS (this may take 5-10 minutes)...")

        fd, script = tempfile.mkstemp(prefix="casaos-install-", suffix=".sh")
        os.close(fd)
        try:
            run_cmd(["curl", "-fsSL", "-o", script, url], dry_run=ctx.dry_run)
            run_cmd(["bash", script], capture=False, dry_run=ctx.dry_run)
        finally:
            os.unlink(script)

        logger.info("CasaOS installed")
