from dataclasses import dataclass
from enum import Enum


class PollResult(Enum):
    CONVERGED = "CONVERGED"
    TIMED_OUT = "TIMED_OUT"


@dataclass(slots=True)
class PollOutcome:
    node: str
    description: str
    result: PollResult
    attempts: int
    duration_seconds: float
    last_error: BaseException | None = None

    @property
    def converged(self) -> bool:
        return self.result == PollResult.CONVERGED
