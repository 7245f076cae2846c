from __future__ import annotations

import logging

from rich.text import Text

from ..console import console
from ..lib.net import interface_summary, primary_address
from ..pipeline import StepCtx
from ..state import PipelineState

logger = logging.getLogger(__name__)


class NetworkInfoStep:
    step_id = "15_network_info"
    reads = ()
    writes = ("server_address",)

    def run(self, ctx: StepCtx, state: PipelineState) -> None:
        logger.info("Current network configuration:")
        summary = interface_summary()
        if summary:
            console.print(Text(summary, style="muted"))

        address = primary_address()
        state.record("server_address", address)
        logger.info("Server IP address: %s (DHCP, configured via router)", address)
