from __future__ import annotations

import shlex
from pathlib import Path
from typing import Dict

from .command import StepError, run_cmd


def read_os_release(path: str = "/etc/os-release") -> Dict[str, str]:
    data: Dict[str, str] = {}
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        parts = shlex.split(value) if value else []
        data[key.strip()] = parts[0] if parts else ""
    return data


def distribution_id(path: str = "/etc/os-release") -> str:
    """``<ID><VERSION_ID>``, e.g. ``ubuntu24.04`` (NVIDIA repo naming)."""

    try:
        info = read_os_release(path)
    except OSError as e:
        raise StepError(f"Unable to read {path}: {e}") from e
    dist = f"{info.get('ID', '')}{info.get('VERSION_ID', '')}"
    if not dist:
        raise StepError(f"Unable to determine distribution from {path}")
    return dist


def release_codename() -> str:
    r = run_cmd(["lsb_release", "-cs"])
    codename = r.stdout.strip()
    if not codename:
        raise StepError("lsb_release returned an empty codename")
    return codename


def dpkg_architecture() -> str:
    r = run_cmd(["dpkg", "--print-architecture"])
    arch = r.stdout.strip()
    if not arch:
        raise StepError("dpkg returned an empty architecture")
    return arch
