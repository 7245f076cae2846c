from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Settings:
    # Storage
    mount_point: str = "/mnt/docker-storage"
    storage_label: str = "docker-storage"
    filesystem: str = "ext4"
    mount_options: str = "defaults"
    fstab_path: str = "/etc/fstab"
    os_drive_hint: str = "238GB"
    storage_drive_hint: str = "931GB"
    settle_seconds: float = 2.0

    # NVIDIA driver
    nvidia_ppa: str = "ppa:graphics-drivers/ppa"
    nvidia_driver_package: str = "nvidia-driver-570"

    # Docker
    docker_prerequisites: Tuple[str, ...] = ("ca-certificates", "curl", "gnupg", "lsb-release")
    docker_packages: Tuple[str, ...] = (
        "docker-ce",
        "docker-ce-cli",
        "containerd.io",
        "docker-buildx-plugin",
        "docker-compose-plugin",
    )
    docker_gpg_url: str = "https://download.docker.com/linux/ubuntu/gpg"
    docker_repo_url: str = "https://download.docker.com/linux/ubuntu"
    docker_keyring: str = "/etc/apt/keyrings/docker.gpg"
    docker_source_list: str = "/etc/apt/sources.list.d/docker.list"
    docker_daemon_config: str = "/etc/docker/daemon.json"
    docker_service: str = "docker"

    # NVIDIA container toolkit
    nvidia_gpg_url: str = "https://nvidia.github.io/libnvidia-container/gpgkey"
    nvidia_list_url: str = "https://nvidia.github.io/libnvidia-container/{distribution}/libnvidia-container.list"
    nvidia_keyring: str = "/usr/share/keyrings/nvidia-container-toolkit-keyring.gpg"
    nvidia_source_list: str = "/etc/apt/sources.list.d/nvidia-container-toolkit.list"
    nvidia_toolkit_package: str = "nvidia-container-toolkit"
    os_release_path: str = "/etc/os-release"

    # CasaOS
    casaos_installer_url: str = "https://get.casaos.io"

    # Optional tools
    extra_tools: Tuple[str, ...] = ("htop", "nano", "net-tools", "wget", "curl", "git")

    reboot_delay_seconds: float = 5.0

    @property
    def docker_data_root(self) -> str:
        return f"{self.mount_point.rstrip('/')}/docker"

    def nvidia_list_url_for(self, distribution: str) -> str:
        return self.nvidia_list_url.format(distribution=distribution)


def settings_from_mapping(raw: Dict[str, Any], base: Optional[Settings] = None) -> Settings:
    base = base or Settings()
    known = {f.name: f for f in fields(Settings)}
    unknown = sorted(set(raw) - set(known))
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")

    overrides: Dict[str, Any] = {}
    for key, value in raw.items():
        current = getattr(base, key)
        if isinstance(current, tuple):
            if not isinstance(value, (list, tuple)):
                raise ValueError(f"Setting {key} must be a list")
            value = tuple(str(v) for v in value)
        elif isinstance(current, float):
            value = float(value)
        else:
            value = str(value)
        overrides[key] = value
    return replace(base, **overrides)


def load_settings(path: Optional[str] = None) -> Settings:
    """Defaults, optionally overridden by a YAML mapping at ``path``."""

    if not path:
        return Settings()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("settings file must be YAML")

    import yaml

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"{path}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    return settings_from_mapping(raw)
