"""
Fuse (backpressure) conditions over a queue worker's per-index status.

A fuse is blown while the queue rejects or delays writes for an index.
The conditions only look at the indices they are asked about: the fuse
state of any other index is noise.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

import msgspec

from convergence.conditions import Condition, subset_condition
from convergence.probes import Probe


class FuseState(Enum):
    BLOWN = "blown"
    RESET = "reset"


class IndexQueueStatus(msgspec.Struct, kw_only=True):
    fuse_blown: bool = False
    pending_count: int = 0
    queue_len: int = 0
    aux_queue_len: int = 0
    draining: bool = False
    batch_min: int | None = None
    batch_max: int | None = None
    delayms_max: int | None = None


class QueueWorkerStatus(msgspec.Struct, kw_only=True):
    indexqs: dict[str, IndexQueueStatus] = msgspec.field(default_factory=dict)


def matches_fuse_state(state: FuseState):
    def matches(status: IndexQueueStatus) -> bool:
        if state == FuseState.BLOWN:
            return status.fuse_blown

        return not status.fuse_blown

    return matches


def fuse_condition(
    probe: Probe,
    indices: Iterable[str],
    state: FuseState,
) -> Condition:
    """
    ``probe`` must yield ``dict[index_name, IndexQueueStatus]``. The
    condition holds when every index in ``indices`` is in ``state``.
    """
    required = sorted(set(indices))
    return subset_condition(
        f"fuses {state.value} for {required}",
        probe,
        required,
        matches_fuse_state(state),
    )
