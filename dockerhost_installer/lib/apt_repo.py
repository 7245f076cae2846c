from __future__ import annotations

import logging
import re
from pathlib import Path

from .command import run_cmd
from .files import write_file

logger = logging.getLogger(__name__)


def fetch_text(url: str, *, dry_run: bool = False) -> str:
    r = run_cmd(["curl", "-fsSL", url], dry_run=dry_run)
    return r.stdout


def install_signing_key(url: str, keyring: str, *, dry_run: bool = False) -> None:
    """Download an ASCII-armored key and store it dearmored at ``keyring``.

    Keys live in their own keyring file and are referenced with
    ``signed-by=``; apt-key is not used.
    """

    run_cmd(["mkdir", "-p", str(Path(keyring).parent)], dry_run=dry_run)
    armored = fetch_text(url, dry_run=dry_run)
    run_cmd(
        ["gpg", "--batch", "--yes", "--dearmor", "-o", keyring],
        input_text=armored,
        dry_run=dry_run,
    )
    logger.info("Installed signing key %s -> %s", url, keyring)


def docker_source_line(*, arch: str, keyring: str, repo_url: str, codename: str) -> str:
    return f"deb [arch={arch} signed-by={keyring}] {repo_url} {codename} stable\n"


_UNSIGNED_DEB = re.compile(r"^deb https://", re.MULTILINE)


def sign_source_list(text: str, keyring: str) -> str:
    """Pin every ``deb https://`` line of a vendor list to ``keyring``."""

    return _UNSIGNED_DEB.sub(f"deb [signed-by={keyring}] https://", text)


def write_source_list(path: str, contents: str, *, dry_run: bool = False) -> None:
    # Replaced wholesale: reruns never stack duplicate sources.
    write_file(path, contents, dry_run=dry_run)
    logger.info("Configured apt source %s", path)
