from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from ..settings import Settings
from .command import StepError, run_cmd
from .fstab import FstabEntry, install_fstab_entry

logger = logging.getLogger(__name__)


class StorageTargetError(ValueError):
    pass


@dataclass(frozen=True)
class BlockDevice:
    name: str
    size: str
    type: str
    mountpoints: Tuple[str, ...] = ()


def _mountpoints(node: Dict[str, Any]) -> List[str]:
    # MOUNTPOINTS needs util-linux >= 2.37 (Ubuntu 22.04 and later).
    found: List[str] = [str(m) for m in node.get("mountpoints") or [] if m]
    for child in node.get("children") or []:
        found.extend(_mountpoints(child))
    return found


def parse_lsblk(output: str) -> List[BlockDevice]:
    """Parse ``lsblk -J`` output into whole-disk devices."""

    if not output.strip():
        return []
    data = json.loads(output)
    disks: List[BlockDevice] = []
    for node in data.get("blockdevices") or []:
        if node.get("type") != "disk":
            continue
        disks.append(
            BlockDevice(
                name=str(node.get("name")),
                size=str(node.get("size") or ""),
                type="disk",
                mountpoints=tuple(_mountpoints(node)),
            )
        )
    return disks


def list_disks() -> List[BlockDevice]:
    # Read-only probe: runs even in dry-run mode.
    r = run_cmd(["lsblk", "-J", "-o", "NAME,SIZE,TYPE,MOUNTPOINTS"])
    return parse_lsblk(r.stdout)


@dataclass(frozen=True)
class StorageTarget:
    """A disk that passed validation and may be wiped."""

    name: str
    size: str

    @property
    def path(self) -> str:
        return f"/dev/{self.name}"

    @classmethod
    def from_user_input(cls, text: str, devices: Sequence[BlockDevice]) -> "StorageTarget":
        name = text.strip()
        if name.startswith("/dev/"):
            name = name[len("/dev/"):]
        if not name:
            raise StorageTargetError("No device name given")

        by_name = {d.name: d for d in devices}
        dev = by_name.get(name)
        if dev is None:
            known = ", ".join(sorted(by_name)) or "none"
            raise StorageTargetError(f"Unknown disk {name!r} (available: {known})")
        if dev.mountpoints:
            raise StorageTargetError(
                f"Disk {name} has mounted filesystems ({', '.join(dev.mountpoints)}); refusing to erase it"
            )
        return cls(name=dev.name, size=dev.size)


def partition_path(disk: str, n: int = 1) -> str:
    # nvme/mmcblk devices use p suffix
    if disk.endswith(tuple("0123456789")):
        return f"{disk}p{n}"
    return f"{disk}{n}"


def filesystem_uuid(dev: str, *, dry_run: bool = False) -> str:
    r = run_cmd(["blkid", "-s", "UUID", "-o", "value", dev], dry_run=dry_run)
    uuid = (r.stdout or "").strip()
    if not uuid and not dry_run:
        raise StepError(f"Unable to determine UUID for {dev}")
    return uuid


def provision_storage(
    target: StorageTarget,
    *,
    settings: Settings,
    dry_run: bool = False,
) -> FstabEntry:
    """Wipe ``target``, create one ext4 partition and mount it persistently.

    The fstab entry is keyed by filesystem UUID; /dev names are not stable
    across reboots. There is no rollback: any failing command raises and
    leaves the disk for manual inspection.
    """

    disk = target.path
    part = partition_path(disk)
    mount_point = settings.mount_point
    logger.info("Partitioning %s...", disk)

    run_cmd(["parted", "-s", disk, "mklabel", "gpt"], dry_run=dry_run)
    run_cmd(["parted", "-s", disk, "mkpart", "primary", settings.filesystem, "0%", "100%"], dry_run=dry_run)

    # Inform kernel, then give udev time to create the partition node.
    run_cmd(["partprobe", disk], dry_run=dry_run)
    if not dry_run:
        time.sleep(settings.settle_seconds)

    logger.info("Formatting %s...", part)
    run_cmd([f"mkfs.{settings.filesystem}", "-F", part], dry_run=dry_run)
    run_cmd(["e2label", part, settings.storage_label], dry_run=dry_run)

    run_cmd(["mkdir", "-p", mount_point], dry_run=dry_run)

    uuid = filesystem_uuid(part, dry_run=dry_run)
    entry = FstabEntry(
        spec=f"UUID={uuid}",
        mountpoint=mount_point,
        fstype=settings.filesystem,
        options=settings.mount_options,
        dump=0,
        passno=2,
    )
    logger.info("Configuring automatic mounting...")
    install_fstab_entry(settings.fstab_path, entry, dry_run=dry_run)

    run_cmd(["mount", "-a"], dry_run=dry_run)

    run_cmd(["chown", "-R", "root:root", mount_point], dry_run=dry_run)
    run_cmd(["chmod", "755", mount_point], dry_run=dry_run)

    logger.info("Storage drive configured and mounted at %s (uuid=%s)", mount_point, uuid)
    return entry


def describe_disks(devices: Iterable[BlockDevice]) -> List[Tuple[str, str, str]]:
    return [(d.name, d.size, ", ".join(d.mountpoints) or "-") for d in devices]
