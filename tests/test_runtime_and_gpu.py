"""Docker install, data-root relocation, NVIDIA driver and container toolkit."""

import json
import os

import pytest

from dockerhost_installer.lib import docker as docker_lib
from dockerhost_installer.lib.apt_repo import docker_source_line, sign_source_list
from dockerhost_installer.lib.command import StepError
from dockerhost_installer.lib.osinfo import distribution_id, read_os_release, release_codename
from dockerhost_installer.state import PipelineState
from dockerhost_installer.steps import ContainerRuntimeStep, GpuDriverStep, GpuToolkitStep


def _state(**flags):
    state = PipelineState()
    for name, value in flags.items():
        state.record(name, value)
    return state


class TestContainerRuntimeStep:
    def test_installs_docker(self, make_ctx, fake_run, settings):
        ctx, _ = make_ctx()
        ContainerRuntimeStep().run(ctx, _state(storage_configured=False))

        assert fake_run.ran("apt-get", "install", "-y", "ca-certificates", "curl", "gnupg", "lsb-release")
        assert fake_run.ran(
            "apt-get", "install", "-y",
            "docker-ce", "docker-ce-cli", "containerd.io", "docker-buildx-plugin", "docker-compose-plugin",
        )
        assert fake_run.index("systemctl", "enable", "docker") < fake_run.index("systemctl", "start", "docker")
        with open(settings.docker_source_list) as f:
            assert f.read() == (
                f"deb [arch=amd64 signed-by={settings.docker_keyring}] "
                "https://download.docker.com/linux/ubuntu noble stable\n"
            )

    def test_signing_key_is_dearmored(self, make_ctx, fake_run, settings):
        ctx, _ = make_ctx()
        ContainerRuntimeStep().run(ctx, _state(storage_configured=False))

        gpg = ("gpg", "--batch", "--yes", "--dearmor", "-o", settings.docker_keyring)
        assert "BEGIN PGP PUBLIC KEY BLOCK" in fake_run.inputs[gpg]
        assert fake_run.ran("curl", "-fsSL", "https://download.docker.com/linux/ubuntu/gpg")

    def test_no_daemon_config_without_storage(self, make_ctx, fake_run, settings):
        ctx, _ = make_ctx()
        ContainerRuntimeStep().run(ctx, _state(storage_configured=False))

        assert not os.path.exists(settings.docker_daemon_config)
        assert not fake_run.ran("systemctl", "stop", "docker")

    def test_relocates_data_root_with_service_stopped(self, make_ctx, fake_run, settings, monkeypatch):
        written_at = []
        real_write = docker_lib.write_file
        monkeypatch.setattr(
            docker_lib,
            "write_file",
            lambda *a, **kw: (written_at.append(len(fake_run.calls)), real_write(*a, **kw)),
        )
        ctx, _ = make_ctx()
        ContainerRuntimeStep().run(ctx, _state(storage_configured=True))

        with open(settings.docker_daemon_config) as f:
            assert json.load(f) == {"data-root": "/mnt/docker-storage/docker"}

        stop = fake_run.index("systemctl", "stop", "docker")
        mkdir = fake_run.calls.index(["mkdir", "-p", "/mnt/docker-storage/docker"])
        starts = [i for i, c in enumerate(fake_run.calls) if c == ["systemctl", "start", "docker"]]
        assert len(starts) == 2
        assert starts[0] < stop < mkdir < starts[1]
        assert written_at and stop < written_at[0] <= starts[1]

    def test_rerun_replaces_source_list(self, make_ctx, fake_run, settings):
        ctx, _ = make_ctx()
        ContainerRuntimeStep().run(ctx, _state(storage_configured=False))
        ContainerRuntimeStep().run(ctx, _state(storage_configured=False))
        with open(settings.docker_source_list) as f:
            assert len(f.read().splitlines()) == 1


class TestGpuDriverStep:
    def test_declined(self, make_ctx, fake_run):
        ctx, _ = make_ctx({"NVIDIA drivers": "n"})
        state = PipelineState()
        GpuDriverStep().run(ctx, state)

        assert state.gpu_configured is False
        assert state.reboot_required is False
        assert fake_run.calls == []

    def test_accepted(self, make_ctx, fake_run):
        ctx, _ = make_ctx({"NVIDIA drivers": "y"})
        state = PipelineState()
        GpuDriverStep().run(ctx, state)

        assert state.gpu_configured is True
        assert state.reboot_required is True
        assert fake_run.calls == [
            ["add-apt-repository", "-y", "ppa:graphics-drivers/ppa"],
            ["apt-get", "update"],
            ["apt-get", "install", "-y", "nvidia-driver-570"],
        ]
        assert not fake_run.ran("reboot")


class TestGpuToolkitStep:
    def test_noop_without_gpu(self, make_ctx, fake_run, settings):
        ctx, script = make_ctx()
        GpuToolkitStep().run(ctx, _state(gpu_configured=False))

        assert fake_run.calls == []
        assert script.asked == []
        assert not os.path.exists(settings.nvidia_source_list)

    def test_installs_toolkit(self, make_ctx, fake_run, settings):
        ctx, _ = make_ctx()
        GpuToolkitStep().run(ctx, _state(gpu_configured=True))

        assert fake_run.ran(
            "curl", "-fsSL", "https://nvidia.github.io/libnvidia-container/ubuntu24.04/libnvidia-container.list"
        )
        with open(settings.nvidia_source_list) as f:
            lines = f.read().splitlines()
        assert lines[0] == (
            f"deb [signed-by={settings.nvidia_keyring}] "
            "https://nvidia.github.io/libnvidia-container/stable/deb/$(ARCH) /"
        )
        assert lines[1].startswith("#deb https://")

        install = fake_run.index("apt-get", "install", "-y", "nvidia-container-toolkit")
        configure = fake_run.index("nvidia-ctk", "runtime", "configure", "--runtime=docker")
        restart = fake_run.index("systemctl", "restart", "docker")
        assert install < configure < restart


class TestHelpers:
    def test_sign_source_list_only_touches_deb_lines(self):
        text = "deb https://a/ /\n# deb https://b/ /\ndeb-src https://c/ /\n"
        assert sign_source_list(text, "/k.gpg") == "deb [signed-by=/k.gpg] https://a/ /\n# deb https://b/ /\ndeb-src https://c/ /\n"

    def test_docker_source_line(self):
        line = docker_source_line(arch="arm64", keyring="/k.gpg", repo_url="https://r", codename="noble")
        assert line == "deb [arch=arm64 signed-by=/k.gpg] https://r noble stable\n"

    def test_os_release(self, settings):
        info = read_os_release(settings.os_release_path)
        assert info["PRETTY_NAME"] == "Ubuntu 24.04.3 LTS"
        assert distribution_id(settings.os_release_path) == "ubuntu24.04"

    def test_os_release_without_id(self, tmp_path):
        p = tmp_path / "os-release"
        p.write_text("NAME=Something\n")
        with pytest.raises(StepError):
            distribution_id(str(p))

    def test_missing_os_release(self, tmp_path):
        with pytest.raises(StepError, match="Unable to read"):
            distribution_id(str(tmp_path / "absent"))

    def test_blank_codename(self, fake_run):
        fake_run.respond(("lsb_release", "-cs"), "\n")
        with pytest.raises(StepError):
            release_codename()
