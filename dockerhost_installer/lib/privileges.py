from __future__ import annotations

import logging
import os
from typing import Callable

logger = logging.getLogger(__name__)


class PrivilegeError(RuntimeError):
    pass


def require_elevated_privileges(*, geteuid: Callable[[], int] = os.geteuid) -> None:
    """Refuse to continue unless running as root."""

    euid = geteuid()
    if euid != 0:
        raise PrivilegeError(f"This installer must be run as root (use sudo); current euid={euid}")
    logger.debug("Running with euid=0")
