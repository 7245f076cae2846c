from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

from .console import console as rich_console

DEFAULT_LOG_PATH = "/var/log/dockerhost-installer.log"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.DEBUG,
    console_level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Everything (including every command line) goes to the log file; the
    console shows INFO and above through rich.

    Notes:
    - Writing to /var/log needs root. If it fails we fall back to a file in
      the working directory so an unprivileged run still leaves a trace.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_dockerhost_configured", False):
        return getattr(logger, "_dockerhost_log_path", log_path)

    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        chosen_path = log_path
    except OSError:
        fallback = str(Path.cwd() / "dockerhost-installer.log")
        file_handler = logging.FileHandler(fallback)
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    file_handler.setLevel(level)
    handlers.append(file_handler)

    if also_console:
        console_handler = RichHandler(
            console=rich_console,
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        console_handler.setLevel(console_level)
        handlers.append(console_handler)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_dockerhost_configured", True)
    setattr(logger, "_dockerhost_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
