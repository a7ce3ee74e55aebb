"""Settling concurrent calls and folding them into stage outcomes."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, List, Optional, Tuple

from ..models.enums import AggregationPolicy, PipelineStage
from ..models.schemas import ErrorDetail
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StageResult:
    """The settled result of one call, tagged with its logical slot."""
    slot: str
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class StageOutcome:
    """What a stage contributes to the run after its policy is applied."""
    stage: PipelineStage
    slots: Tuple[str, ...] = ()
    values: Dict[str, Any] = field(default_factory=dict)
    error: Optional[ErrorDetail] = None

    @property
    def launched(self) -> bool:
        return bool(self.slots)

    def slots_with_prefix(self, prefix: str) -> List[str]:
        """Launched slots of one family, e.g. "mood_board." in launch order."""
        return [slot for slot in self.slots if slot.startswith(prefix)]

    def get(self, slot: str, default: Any = None) -> Any:
        return self.values.get(slot, default)


async def settle(calls: List[Tuple[str, Awaitable]]) -> List[StageResult]:
    """
    Run every call concurrently and wait until all of them have settled.

    Results come back in launch order regardless of completion order.
    """
    slots = [slot for slot, _ in calls]
    results = await asyncio.gather(*(call for _, call in calls), return_exceptions=True)

    return [
        StageResult(slot=slot, error=result) if isinstance(result, BaseException)
        else StageResult(slot=slot, value=result)
        for slot, result in zip(slots, results)
    ]


def aggregate(
    results: List[StageResult],
    policy: AggregationPolicy,
    stage: PipelineStage,
    message: str,
) -> StageOutcome:
    """
    Fold settled results into one outcome.

    ALL_OR_NOTHING drops every value when any call failed; BEST_EFFORT keeps
    the successful ones. Either way at most one error line is produced.
    """
    failures = [r for r in results if not r.ok]

    if failures and policy == AggregationPolicy.ALL_OR_NOTHING:
        values = {}
    else:
        values = {r.slot: r.value for r in results if r.ok}

    error = None
    if failures:
        error = ErrorDetail(
            stage=stage,
            message=message,
            cause="; ".join(f"{r.slot}: {r.error}" for r in failures),
        )
        logger.warning(
            f"Stage {stage.value} had {len(failures)}/{len(results)} failed calls",
            extra={
                "stage": stage.value,
                "policy": policy.value,
                "failed_slots": [r.slot for r in failures],
                "kept_slots": list(values),
            }
        )

    return StageOutcome(
        stage=stage,
        slots=tuple(r.slot for r in results),
        values=values,
        error=error,
    )


def skipped(stage: PipelineStage, message: str, error: BaseException) -> StageOutcome:
    """Outcome for a stage that could not launch its calls at all."""
    logger.warning(
        f"Stage {stage.value} skipped",
        extra={"stage": stage.value, "error": str(error)}
    )
    return StageOutcome(
        stage=stage,
        error=ErrorDetail(stage=stage, message=message, cause=str(error)),
    )
