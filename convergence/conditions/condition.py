from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Hashable, Iterable, Mapping

from convergence.cluster import Node
from convergence.errors import TransportError
from convergence.probes import Probe, ProbeOutcome, ProbeTransportError, ProbeValue

Check = Callable[[Node], Awaitable[bool]]


def raise_for_transport(outcome: ProbeOutcome) -> None:
    """Re-raise a probe transport error so the poller records it as 'not yet'."""
    if isinstance(outcome, ProbeTransportError):
        cause = outcome.cause
        if isinstance(cause, TransportError):
            raise cause

        raise TransportError(str(cause), cause=cause)


@dataclass(slots=True, frozen=True)
class Condition:
    """
    A named predicate over one node.

    ``check`` may perform a probe, but must not touch verification
    bookkeeping. The description is what a timeout failure reports.
    """

    description: str
    check: Check

    async def __call__(self, node: Node) -> bool:
        return bool(await self.check(node))

    @classmethod
    def from_probe(
        cls,
        description: str,
        probe: Probe,
        predicate: Callable[[Any], bool] | None = None,
    ) -> Condition:
        """True iff the probe yields a value and the predicate accepts it."""

        async def check(node: Node) -> bool:
            outcome = await probe(node)
            raise_for_transport(outcome)
            if not isinstance(outcome, ProbeValue):
                return False

            if predicate is None:
                return True

            return bool(predicate(outcome.value))

        return cls(description=description, check=check)

    @classmethod
    def all_of(cls, description: str, *conditions: Condition) -> Condition:
        async def check(node: Node) -> bool:
            for condition in conditions:
                if not await condition(node):
                    return False

            return True

        return cls(description=description, check=check)


def subset_condition(
    description: str,
    probe: Probe,
    required: Iterable[Hashable],
    matches: Callable[[Any], bool],
) -> Condition:
    """
    True iff every required key is present in the probed mapping and its
    record satisfies ``matches``.

    Keys outside ``required`` are ignored, so the condition is monotone:
    if it holds for a set of keys it holds for any subset of them.
    """
    required_keys = frozenset(required)

    async def check(node: Node) -> bool:
        outcome = await probe(node)
        raise_for_transport(outcome)
        if not isinstance(outcome, ProbeValue):
            return False

        records: Mapping[Hashable, Any] = outcome.value
        matching = {key for key, record in records.items() if matches(record)}
        return required_keys.issubset(matching)

    return Condition(description=description, check=check)
