"""
Index queue (solrq) status and tuning.

``yz_solrq.status`` returns one entry per queue worker, keyed by worker
id, each holding the per-index queue status under ``indexqs``. A worker
that has not started yet is simply absent from the answer and reads as
an empty mapping, so fuse waits keep polling instead of failing.
"""

from typing import Any, Iterable, Literal

import msgspec

from convergence.cluster import Node, Target, resolve_nodes
from convergence.errors import TransportError
from convergence.harness import Harness
from convergence.logging.convergence_logging_models import OperationInfo
from convergence.polling import PollOutcome
from convergence.probes import FunctionProbe, ProbeOutcome, ProbeValue
from convergence.transport import RemoteCaller, multicall
from convergence.verification import (
    FuseState,
    IndexQueueStatus,
    QueueWorkerStatus,
    fuse_condition,
)

PurgeStrategy = Literal["purge_one", "purge_index", "off"]


async def read_queue_status(
    caller: RemoteCaller,
    node: Node,
    solrq_id: str,
) -> dict[str, IndexQueueStatus]:
    """Per-index queue status of worker ``solrq_id`` on ``node``."""
    workers = await caller.call(node, "yz_solrq", "status", [])
    if workers is None:
        return {}

    try:
        status = msgspec.convert(workers, dict[str, QueueWorkerStatus])

    except msgspec.ValidationError as err:
        raise TransportError(f"Undecodable queue status from {node}: {err}", cause=err) from err

    worker = status.get(solrq_id)
    if worker is None:
        return {}

    return worker.indexqs


def queue_status_probe(harness: Harness, solrq_id: str) -> FunctionProbe:
    async def observe(node: Node) -> ProbeOutcome:
        return ProbeValue(await read_queue_status(harness.caller, node, solrq_id))

    return FunctionProbe(observe, name=f"yz_solrq:status:{solrq_id}", logger=harness.logger)


async def _wait_for_fuses(
    harness: Harness,
    target: Target,
    solrq_id: str,
    indices: Iterable[str],
    state: FuseState,
) -> list[PollOutcome]:
    indices = list(indices)

    await harness.logger.log(
        OperationInfo(
            message=f"Waiting for fuses to be {state.value} for indices {indices} on {solrq_id}",
            operation=f"wait_until_fuses_{state.value}",
        )
    )

    return await harness.wait_until(
        target,
        fuse_condition(queue_status_probe(harness, solrq_id), indices, state),
    )


async def wait_until_fuses_blown(
    harness: Harness,
    target: Target,
    solrq_id: str,
    indices: Iterable[str],
) -> list[PollOutcome]:
    return await _wait_for_fuses(harness, target, solrq_id, indices, FuseState.BLOWN)


async def wait_until_fuses_reset(
    harness: Harness,
    target: Target,
    solrq_id: str,
    indices: Iterable[str],
) -> list[PollOutcome]:
    return await _wait_for_fuses(harness, target, solrq_id, indices, FuseState.RESET)


async def set_index_batching(
    harness: Harness,
    target: Target,
    index: str,
    batch_min: int,
    batch_max: int,
    delayms_max: int,
) -> tuple[dict[Node, Any], list[Node]]:
    return await multicall(
        harness.caller,
        resolve_nodes(target),
        "yz_solrq",
        "set_index",
        [index, batch_min, batch_max, delayms_max],
    )


async def set_hwm(
    harness: Harness,
    target: Target,
    hwm: int,
) -> tuple[dict[Node, Any], list[Node]]:
    if hwm < 1:
        raise ValueError("High water mark must be positive")

    return await multicall(harness.caller, resolve_nodes(target), "yz_solrq", "set_hwm", [hwm])


async def set_purge_strategy(
    harness: Harness,
    target: Target,
    strategy: PurgeStrategy,
) -> tuple[dict[Node, Any], list[Node]]:
    return await multicall(
        harness.caller,
        resolve_nodes(target),
        "yz_solrq",
        "set_purge_strategy",
        [strategy],
    )
