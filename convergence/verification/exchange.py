"""
Anti-entropy (AAE) exchange and tree-build conditions.

An exchange round is complete since ``T`` when every ``(partition, n_val)``
pair on a node has exchanged strictly after ``T``. ``T`` is fixed when the
condition is built: re-sampling it between attempts would move the target
forward with every attempt and the condition could never hold.
"""

from __future__ import annotations

from typing import Sequence

import msgspec

from convergence.cluster import Node
from convergence.conditions import Condition, raise_for_transport
from convergence.logging import Logger
from convergence.logging.convergence_logging_models import OperationInfo
from convergence.probes import Probe, ProbeValue


class RepairStats(msgspec.Struct, kw_only=True):
    last: int = 0
    min: int = 0
    max: int = 0
    mean: float = 0.0


class ExchangeRecord(msgspec.Struct, kw_only=True):
    partition: int
    n_val: int
    last_exchange: float | None = None
    repair_stats: RepairStats = msgspec.field(default_factory=RepairStats)

    def exchanged_since(self, since: float) -> bool:
        if self.last_exchange is None:
            return False

        return self.last_exchange > since


class TreeRecord(msgspec.Struct, kw_only=True):
    partition: int
    built: float | None = None

    @property
    def is_built(self) -> bool:
        return self.built is not None


def records_waiting_since(
    records: Sequence[ExchangeRecord],
    since: float,
) -> list[tuple[int, int]]:
    return [
        (record.partition, record.n_val)
        for record in records
        if not record.exchanged_since(since)
    ]


def exchange_round_condition(
    probe: Probe,
    since: float,
    logger: Logger | None = None,
) -> Condition:
    """
    ``probe`` must yield the node's exchange records as a list of
    ``ExchangeRecord``.
    """

    async def check(node: Node) -> bool:
        outcome = await probe(node)
        raise_for_transport(outcome)
        if not isinstance(outcome, ProbeValue):
            return False

        waiting = records_waiting_since(outcome.value, since)
        if waiting and logger is not None:
            await logger.log(
                OperationInfo(
                    message=f"Still waiting for AAE of {node} {waiting}",
                    operation="wait_for_full_exchange_round",
                    node=node,
                )
            )

        return len(waiting) == 0

    return Condition(
        description=f"full exchange round since {since}",
        check=check,
    )


def trees_built_condition(
    probe: Probe,
    logger: Logger | None = None,
) -> Condition:
    """``probe`` must yield the node's tree records as a list of ``TreeRecord``."""

    async def check(node: Node) -> bool:
        outcome = await probe(node)
        raise_for_transport(outcome)
        if not isinstance(outcome, ProbeValue):
            return False

        not_built = [record.partition for record in outcome.value if not record.is_built]
        if logger is not None:
            await logger.log(
                OperationInfo(
                    message=f"Check if all trees built for node {node}, not built: {not_built}",
                    operation="wait_for_all_trees",
                    node=node,
                )
            )

        return len(not_built) == 0

    return Condition(description="all AAE trees built", check=check)
