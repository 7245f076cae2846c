from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .pipeline import PipelineResult
from .state import PipelineState

logger = logging.getLogger(__name__)


def build_report(state: PipelineState, result: Optional[PipelineResult]) -> Dict[str, Any]:
    report: Dict[str, Any] = {"state": state.as_dict()}
    if result is None:
        report["completed"] = False
        return report
    report["completed"] = result.ok
    report["ran_steps"] = list(result.ran_steps)
    if result.error is not None:
        report["failed_step"] = result.failed_step
        report["error"] = {
            "argv": list(result.error.argv),
            "message": str(result.error),
            "returncode": result.error.returncode,
            "stderr": result.error.stderr,
        }
    return report


def save_report(path: str, state: PipelineState, result: Optional[PipelineResult]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(build_report(state, result), indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.info("Run report written to %s", str(p))
