from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from .lib.command import StepError
from .settings import Settings
from .state import FLAGS, PipelineState

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single provisioning step.

    ``reads``/``writes`` name the PipelineState flags it consumes/produces.
    """

    step_id: str
    reads: Tuple[str, ...]
    writes: Tuple[str, ...]

    def run(self, ctx: "StepCtx", state: PipelineState) -> None:
        ...


@dataclass(frozen=True)
class StepCtx:
    settings: Settings
    confirm: Callable[[str], bool]
    ask: Callable[[str], str]
    dry_run: bool = False


@dataclass(frozen=True)
class PipelineResult:
    state: PipelineState
    ran_steps: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[StepError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PipelineOrderError(ValueError):
    pass


def validate_step_order(steps: Sequence[Step]) -> None:
    """Check that every flag a step reads is written by an earlier step.

    Also rejects unknown flags and flags with more than one producer.
    """

    produced: dict[str, str] = {}
    for step in steps:
        for flag in (*step.reads, *step.writes):
            if flag not in FLAGS:
                raise PipelineOrderError(f"{step.step_id}: unknown flag {flag!r}")
        missing = [f for f in step.reads if f not in produced]
        if missing:
            raise PipelineOrderError(
                f"{step.step_id} reads {', '.join(missing)} before any step produces it"
            )
        for flag in step.writes:
            if flag in produced:
                raise PipelineOrderError(
                    f"{step.step_id} writes {flag}, already produced by {produced[flag]}"
                )
            produced[flag] = step.step_id


def run_pipeline(
    *,
    ctx: StepCtx,
    state: PipelineState,
    steps: Sequence[Step],
) -> PipelineResult:
    """Run steps in order; stop at the first step that fails.

    Nothing is retried or rolled back.
    """

    validate_step_order(steps)

    ran: List[str] = []
    for step in steps:
        logger.debug("Running step %s", step.step_id)
        try:
            step.run(ctx, state)
        except StepError as e:
            logger.error("Step %s failed: %s", step.step_id, e)
            return PipelineResult(state=state, ran_steps=ran, failed_step=step.step_id, error=e)
        ran.append(step.step_id)

    return PipelineResult(state=state, ran_steps=ran)
