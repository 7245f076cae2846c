"""Shared fixtures: a fake command runner, scripted prompts and sandboxed settings."""

import json
import subprocess
from dataclasses import replace

import pytest

from dockerhost_installer.lib import command, prompt
from dockerhost_installer.settings import Settings

ROOT_UUID = "0f3e2d1c-aaaa-bbbb-cccc-000000000001"
STORAGE_UUID = "7c9d5b1e-1111-2222-3333-444455556666"

LSBLK = {
    "blockdevices": [
        {
            "name": "sda",
            "size": "238.5G",
            "type": "disk",
            "mountpoints": [None],
            "children": [
                {"name": "sda1", "size": "1G", "type": "part", "mountpoints": ["/boot/efi"]},
                {"name": "sda2", "size": "237.5G", "type": "part", "mountpoints": ["/"]},
            ],
        },
        {"name": "sdb", "size": "931.5G", "type": "disk", "mountpoints": [None]},
        {"name": "sr0", "size": "1024M", "type": "rom", "mountpoints": [None]},
    ]
}

NVIDIA_LIST = (
    "deb https://nvidia.github.io/libnvidia-container/stable/deb/$(ARCH) /\n"
    "#deb https://nvidia.github.io/libnvidia-container/experimental/deb/$(ARCH) /\n"
)

DEFAULT_RESPONSES = {
    ("lsblk",): json.dumps(LSBLK),
    ("blkid",): STORAGE_UUID + "\n",
    ("hostname", "-I"): "192.168.1.50 fd00::50 \n",
    ("ip", "-br"): "lo UNKNOWN 127.0.0.1/8\nenp3s0 UP 192.168.1.50/24\n",
    ("lsb_release", "-cs"): "noble\n",
    ("dpkg", "--print-architecture"): "amd64\n",
    ("curl", "-fsSL", "https://nvidia.github.io/libnvidia-container/ubuntu24.04/libnvidia-container.list"): NVIDIA_LIST,
    ("curl",): "-----BEGIN PGP PUBLIC KEY BLOCK-----\n...\n-----END PGP PUBLIC KEY BLOCK-----\n",
    ("df", "-h"): "Filesystem Size Used Avail Use% Mounted on\n/dev/sdb1 916G 28K 870G 1% /mnt/docker-storage\n",
}


class FakeRunner:
    """Stands in for subprocess.run; records argv and answers by prefix."""

    def __init__(self):
        self.calls = []
        self.inputs = {}
        self.responses = dict(DEFAULT_RESPONSES)
        self.failures = {}

    def respond(self, prefix, stdout):
        self.responses[tuple(prefix)] = stdout

    def fail(self, prefix, returncode=1, stderr="boom"):
        self.failures[tuple(prefix)] = (returncode, stderr)

    @staticmethod
    def _match(table, argv):
        best = None
        for prefix in table:
            if tuple(argv[: len(prefix)]) == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        return best

    def __call__(self, argv, input=None, **kwargs):
        argv = list(argv)
        self.calls.append(argv)
        if input is not None:
            self.inputs[tuple(argv)] = input
        failure = self._match(self.failures, argv)
        if failure is not None:
            rc, err = self.failures[failure]
            return subprocess.CompletedProcess(argv, rc, "", err)
        hit = self._match(self.responses, argv)
        out = self.responses[hit] if hit is not None else ""
        if kwargs.get("stdout") is None:
            out = None
        return subprocess.CompletedProcess(argv, 0, out, "" if kwargs.get("stderr") is not None else None)

    def ran(self, *prefix):
        return any(tuple(c[: len(prefix)]) == prefix for c in self.calls)

    def index(self, *prefix):
        for i, c in enumerate(self.calls):
            if tuple(c[: len(prefix)]) == prefix:
                return i
        raise AssertionError(f"{prefix} never ran; calls={self.calls}")

    def matching(self, *prefix):
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


class ScriptedInput:
    """input() replacement answering by question substring; unknown questions get ""."""

    def __init__(self, answers=None):
        self.answers = dict(answers or {})
        self.asked = []

    def __call__(self, text):
        self.asked.append(text)
        for key, reply in self.answers.items():
            if key in text:
                return reply
        return ""

    def was_asked(self, fragment):
        return any(fragment in q for q in self.asked)

    def confirm(self, question):
        return prompt.confirm(question, input_fn=self)

    def ask(self, question):
        return prompt.ask(question, input_fn=self)


@pytest.fixture
def fake_run(monkeypatch):
    runner = FakeRunner()
    monkeypatch.setattr(command.subprocess, "run", runner)
    return runner


@pytest.fixture
def no_sleep(monkeypatch):
    slept = []
    monkeypatch.setattr("time.sleep", slept.append)
    return slept


@pytest.fixture
def settings(tmp_path):
    etc = tmp_path / "etc"
    etc.mkdir()
    fstab = etc / "fstab"
    fstab.write_text(f"UUID={ROOT_UUID} / ext4 defaults 0 1\n", encoding="utf-8")
    os_release = etc / "os-release"
    os_release.write_text(
        'PRETTY_NAME="Ubuntu 24.04.3 LTS"\nNAME="Ubuntu"\nVERSION_ID="24.04"\nID=ubuntu\nID_LIKE=debian\n',
        encoding="utf-8",
    )
    return replace(
        Settings(),
        fstab_path=str(fstab),
        os_release_path=str(os_release),
        docker_keyring=str(etc / "apt/keyrings/docker.gpg"),
        docker_source_list=str(etc / "apt/sources.list.d/docker.list"),
        docker_daemon_config=str(etc / "docker/daemon.json"),
        nvidia_keyring=str(tmp_path / "usr/share/keyrings/nvidia-container-toolkit-keyring.gpg"),
        nvidia_source_list=str(etc / "apt/sources.list.d/nvidia-container-toolkit.list"),
        settle_seconds=0.0,
        reboot_delay_seconds=5.0,
    )


@pytest.fixture
def scripted():
    return ScriptedInput


@pytest.fixture
def make_ctx(settings):
    from dockerhost_installer.pipeline import StepCtx

    def _make(answers=None, dry_run=False):
        script = ScriptedInput(answers)
        ctx = StepCtx(settings=settings, confirm=script.confirm, ask=script.ask, dry_run=dry_run)
        return ctx, script

    return _make
