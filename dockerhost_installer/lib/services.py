from __future__ import annotations

from .command import run_cmd


def systemctl(action: str, unit: str, *, dry_run: bool = False) -> None:
    run_cmd(["systemctl", action, unit], dry_run=dry_run)


def enable_and_start(unit: str, *, dry_run: bool = False) -> None:
    systemctl("enable", unit, dry_run=dry_run)
    systemctl("start", unit, dry_run=dry_run)
