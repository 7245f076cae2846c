from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .files import read_file, write_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FstabEntry:
    spec: str
    mountpoint: str
    fstype: str
    options: str = "defaults"
    dump: int = 0
    passno: int = 2

    def render(self) -> str:
        return f"{self.spec} {self.mountpoint} {self.fstype} {self.options} {self.dump} {self.passno}"


def _mountpoint_of(line: str) -> str | None:
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    fields = stripped.split()
    if len(fields) < 2:
        return None
    return fields[1]


def merge_entry(existing: str, entry: FstabEntry) -> str:
    """Return fstab text with ``entry`` as the only line for its mount point.

    Other lines (comments included) are kept as they are.
    """

    kept: List[str] = []
    for line in existing.splitlines():
        if _mountpoint_of(line) == entry.mountpoint:
            logger.warning("Replacing existing fstab entry for %s: %s", entry.mountpoint, line.strip())
            continue
        kept.append(line)
    kept.append(entry.render())
    return "\n".join(kept) + "\n"


def install_fstab_entry(path: str, entry: FstabEntry, *, dry_run: bool = False) -> None:
    write_file(path, merge_entry(read_file(path), entry), dry_run=dry_run)
    logger.info("fstab entry: %s", entry.render())
