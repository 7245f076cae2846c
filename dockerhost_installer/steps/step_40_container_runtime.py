from __future__ import annotations

import logging

from ..lib.apt_repo import docker_source_line, install_signing_key, write_source_list
from ..lib.docker import relocate_data_root
from ..lib.osinfo import dpkg_architecture, release_codename
from ..lib.pkg import apt_install, apt_update
from ..lib.services import enable_and_start
from ..pipeline import StepCtx
from ..state import PipelineState

logger = logging.getLogger(__name__)


class ContainerRuntimeStep:
    step_id = "40_container_runtime"
    reads = ("storage_configured",)
    writes = ()

    def run(self, ctx: StepCtx, state: PipelineState) -> None:
        s = ctx.settings
        dry_run = ctx.dry_run

        logger.info("Installing Docker...")
        apt_install(list(s.docker_prerequisites), dry_run=dry_run)

        install_signing_key(s.docker_gpg_url, s.docker_keyring, dry_run=dry_run)
        write_source_list(
            s.docker_source_list,
            docker_source_line(
                arch=dpkg_architecture(),
                keyring=s.docker_keyring,
                repo_url=s.docker_repo_url,
                codename=release_codename(),
            ),
            dry_run=dry_run,
        )

        apt_update(dry_run=dry_run)
        apt_install(list(s.docker_packages), dry_run=dry_run)
        enable_and_start(s.docker_service, dry_run=dry_run)
        logger.info("Docker installed")

        if state.storage_configured:
            logger.info("Configuring Docker to use storage drive...")
            relocate_data_root(
                data_root=s.docker_data_root,
                daemon_config=s.docker_daemon_config,
                service=s.docker_service,
                dry_run=dry_run,
            )
