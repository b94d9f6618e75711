from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class ProbeValue(Generic[T]):
    """The node answered with the awaited value."""

    value: T


@dataclass(slots=True, frozen=True)
class ProbeNegative:
    """The node answered, but has not reached the target state yet."""

    reason: str | None = None


@dataclass(slots=True, frozen=True)
class ProbeTransportError:
    """The node could not be reached or its answer could not be decoded."""

    cause: BaseException

    def __str__(self) -> str:
        return str(self.cause)


ProbeOutcome = ProbeValue[Any] | ProbeNegative | ProbeTransportError


def describe_outcome(outcome: ProbeOutcome) -> str:
    match outcome:
        case ProbeValue(value=value):
            return f"value({value!r})"
        case ProbeNegative(reason=reason):
            return f"negative({reason})" if reason else "negative"
        case ProbeTransportError(cause=cause):
            return f"transport_error({cause})"
        case _:
            raise TypeError(f"Unknown probe outcome {outcome!r}")
