from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def write_file(path: str, contents: str, *, dry_run: bool = False) -> None:
    """Write (replace) a config file, creating parent dirs."""

    p = Path(path)
    if dry_run:
        logger.info("Would write %s", str(p))
        logger.debug("Contents of %s:\n%s", str(p), contents)
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(contents, encoding="utf-8")
    logger.debug("Wrote %s (%d bytes)", str(p), len(contents.encode("utf-8")))


def read_file(path: str) -> str:
    """Return file contents, or "" when the file does not exist yet."""

    p = Path(path)
    if not p.exists():
        return ""
    return p.read_text(encoding="utf-8")
