from __future__ import annotations

import logging

from .command import run_cmd

logger = logging.getLogger(__name__)


def interface_summary() -> str:
    r = run_cmd(["ip", "-br", "addr", "show"], check=False)
    return r.stdout.rstrip()


def primary_address() -> str:
    """First address reported by ``hostname -I`` (DHCP-assigned on a fresh host)."""

    r = run_cmd(["hostname", "-I"], check=False)
    tokens = r.stdout.split()
    if not tokens:
        logger.warning("Could not determine server IP address")
        return "unknown"
    return tokens[0]
