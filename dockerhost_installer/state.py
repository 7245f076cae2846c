from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Set

logger = logging.getLogger(__name__)

FLAGS = ("storage_configured", "gpu_configured", "server_address", "reboot_required")


class StateError(RuntimeError):
    pass


@dataclass
class PipelineState:
    """Flags threaded from producer steps to consumer steps.

    Each flag is written at most once, through ``record``.
    """

    storage_configured: bool = False
    gpu_configured: bool = False
    server_address: str = ""
    reboot_required: bool = False
    written: Set[str] = field(default_factory=set, repr=False)

    def record(self, flag: str, value: Any) -> None:
        if flag not in FLAGS:
            raise StateError(f"Unknown pipeline flag: {flag}")
        if flag in self.written:
            raise StateError(f"Pipeline flag {flag} already set to {getattr(self, flag)!r}")
        setattr(self, flag, value)
        self.written.add(flag)
        logger.debug("state.%s = %r", flag, value)

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in FLAGS}
