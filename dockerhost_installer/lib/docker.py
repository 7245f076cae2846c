from __future__ import annotations

import json
import logging
from typing import Any, Dict

from .command import run_cmd
from .files import write_file
from .services import systemctl

logger = logging.getLogger(__name__)


def render_daemon_config(data_root: str) -> str:
    cfg: Dict[str, Any] = {"data-root": data_root}
    return json.dumps(cfg, indent=2) + "\n"


def relocate_data_root(
    *,
    data_root: str,
    daemon_config: str,
    service: str = "docker",
    dry_run: bool = False,
) -> None:
    """Point the Docker daemon at ``data_root``.

    The service must be stopped while daemon.json changes so nothing is
    writing to the old data root during the switch.
    """

    systemctl("stop", service, dry_run=dry_run)
    run_cmd(["mkdir", "-p", data_root], dry_run=dry_run)
    write_file(daemon_config, render_daemon_config(data_root), dry_run=dry_run)
    systemctl("start", service, dry_run=dry_run)
    logger.info("Docker configured to use %s", data_root)
