from __future__ import annotations

import logging
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(*, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "update"], env=APT_ENV, capture=False, dry_run=dry_run)


def apt_upgrade(*, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "upgrade", "-y"], env=APT_ENV, capture=False, dry_run=dry_run)


def apt_install(packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    run_cmd(
        ["apt-get", "install", "-y", *packages],
        env=APT_ENV,
        capture=False,
        dry_run=dry_run,
    )
    logger.debug("Installed %s", " ".join(packages))


def add_apt_repository(repo: str, *, dry_run: bool = False) -> None:
    run_cmd(["add-apt-repository", "-y", repo], env=APT_ENV, capture=False, dry_run=dry_run)
