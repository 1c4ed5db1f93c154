"""
Error values.

Nothing here is raised by the engine; these travel inside `Error(...)`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum, auto

from orderflow.domain._names import FAILURE_LABELS, EffectName


class FailureKind(Enum):
    """Why an effect call gave up."""
    ERROR = auto()
    TIMEOUT = auto()
    CANCELLED = auto()


@dataclass(frozen=True, slots=True)
class NotFound:
    """A required entity was absent at fetch time."""
    entity: str
    id: str

    def __str__(self) -> str:
        return f"{self.entity} {self.id} not found"


@dataclass(frozen=True, slots=True)
class EffectFailure:
    """An effect call that exhausted its retry policy (or was cut short)."""
    effect: EffectName
    cause: str
    attempts: int
    kind: FailureKind = FailureKind.ERROR

    def __str__(self) -> str:
        return f"{FAILURE_LABELS[self.effect]}: {self.cause}"


type Cause = NotFound | EffectFailure


class Stage(StrEnum):
    FETCHING = "fetching"
    COMPUTING = "computing"
    APPLYING_CRITICAL = "applying_critical"
    APPLYING_OPTIONAL = "applying_optional"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class ProcessFailure:
    """
    Aggregated failure of one `process_order` call.

    `causes` is never empty. Not-found and fetch failures carry exactly one
    cause; critical-effect failures carry one per failed effect, in dispatch
    order.
    """

    stage: Stage
    causes: tuple[Cause, ...]

    def __post_init__(self) -> None:
        if not self.causes:
            raise ValueError("ProcessFailure needs at least one cause")

    def messages(self) -> list[str]:
        return [str(c) for c in self.causes]

    def __str__(self) -> str:
        return "; ".join(self.messages())


__all__ = (
    "FailureKind",
    "NotFound",
    "EffectFailure",
    "Cause",
    "Stage",
    "ProcessFailure",
)
