"""
Active anti-entropy (AAE) operations.

Exchange and tree information is read with ``yz_kv.compute_exchange_info``
and ``yz_kv.compute_tree_info``. Each node answers with a list of records;
both ``[partition, n_val, last_exchange, repair_stats]`` rows and objects
keyed by field name are accepted.
"""

import time
from typing import Any, Literal

import msgspec

from convergence.cluster import Target, resolve_nodes
from convergence.errors import OperationFailed
from convergence.harness import Harness
from convergence.logging.convergence_logging_models import OperationInfo
from convergence.polling import PollOutcome
from convergence.probes import (
    ProbeNegative,
    ProbeOutcome,
    ProbeValue,
    RemoteCallProbe,
)
from convergence.verification import (
    ExchangeRecord,
    RepairStats,
    TreeRecord,
    exchange_round_condition,
    trees_built_condition,
)

AAEMode = Literal["automatic", "manual"]


class _ExchangeRow(msgspec.Struct, array_like=True):
    partition: int
    n_val: int
    last_exchange: float | None = None
    repair_stats: RepairStats | None = None


class _TreeRow(msgspec.Struct, array_like=True):
    partition: int
    built: float | None = None


def _exchange_record(row: Any) -> ExchangeRecord:
    if isinstance(row, dict):
        return msgspec.convert(row, ExchangeRecord)

    decoded = msgspec.convert(row, _ExchangeRow)
    return ExchangeRecord(
        partition=decoded.partition,
        n_val=decoded.n_val,
        last_exchange=decoded.last_exchange,
        repair_stats=decoded.repair_stats or RepairStats(),
    )


def _tree_record(row: Any) -> TreeRecord:
    if isinstance(row, dict):
        return msgspec.convert(row, TreeRecord)

    decoded = msgspec.convert(row, _TreeRow)
    return TreeRecord(partition=decoded.partition, built=decoded.built)


def interpret_exchange_info(result: Any) -> ProbeOutcome:
    """
    Malformed rows raise ``msgspec.ValidationError``, which the probe
    reports as a transport fault.
    """
    if result is None:
        return ProbeNegative("undefined")

    return ProbeValue([_exchange_record(row) for row in msgspec.convert(result, list)])


def interpret_tree_info(result: Any) -> ProbeOutcome:
    if result is None:
        return ProbeNegative("undefined")

    return ProbeValue([_tree_record(row) for row in msgspec.convert(result, list)])


def exchange_info_probe(harness: Harness) -> RemoteCallProbe:
    return RemoteCallProbe(
        harness.caller,
        "yz_kv",
        "compute_exchange_info",
        interpret=interpret_exchange_info,
        logger=harness.logger,
    )


def tree_info_probe(harness: Harness) -> RemoteCallProbe:
    return RemoteCallProbe(
        harness.caller,
        "yz_kv",
        "compute_tree_info",
        interpret=interpret_tree_info,
        logger=harness.logger,
    )


async def wait_for_full_exchange_round(
    harness: Harness,
    target: Target | None = None,
    since: float | None = None,
) -> list[PollOutcome]:
    """
    Wait until every ``(partition, n_val)`` on every node in ``target`` has
    exchanged after ``since`` (now, by default). ``since`` is taken once,
    before the first attempt.
    """
    if target is None:
        target = harness.cluster

    if since is None:
        since = time.time()

    await harness.logger.log(
        OperationInfo(
            message=f"wait for full AAE exchange round on cluster {resolve_nodes(target)}",
            operation="wait_for_full_exchange_round",
        )
    )

    return await harness.wait_until(
        target,
        exchange_round_condition(exchange_info_probe(harness), since, logger=harness.logger),
    )


async def wait_for_all_trees(
    harness: Harness,
    target: Target | None = None,
) -> list[PollOutcome]:
    if target is None:
        target = harness.cluster

    return await harness.wait_until(
        target,
        trees_built_condition(tree_info_probe(harness), logger=harness.logger),
    )


async def _call_each(
    harness: Harness,
    target: Target,
    module: str,
    function: str,
    message: str,
    args: list[Any] | None = None,
) -> None:
    await harness.logger.log(OperationInfo(message=message, operation=f"{module}:{function}"))

    for node in resolve_nodes(target):
        result = await harness.caller.call(node, module, function, args or [])
        if result != "ok":
            raise OperationFailed(
                f"{module}:{function} on {node} returned {result!r}, expected 'ok'"
            )


async def expire_aae_trees(harness: Harness, target: Target) -> None:
    await _call_each(
        harness, target, "yz_entropy_mgr", "expire_trees",
        "Expiring YZ AAE trees across cluster",
    )


async def clear_aae_trees(harness: Harness, target: Target) -> None:
    await _call_each(
        harness, target, "yz_entropy_mgr", "clear_trees",
        "Clearing YZ AAE trees across cluster",
    )


async def expire_kv_trees(harness: Harness, target: Target) -> None:
    await _call_each(
        harness, target, "riak_kv_entropy_manager", "expire_trees",
        "Expiring KV AAE trees across cluster",
    )


async def clear_kv_trees(harness: Harness, target: Target) -> None:
    await _call_each(
        harness, target, "riak_kv_entropy_manager", "clear_trees",
        "Clearing KV AAE trees across cluster",
    )


async def set_aae_mode(harness: Harness, target: Target, mode: AAEMode) -> list[Any]:
    if mode not in ("automatic", "manual"):
        raise ValueError(f"Unknown AAE mode '{mode}'")

    return [
        await harness.caller.call(node, "yz_entropy_mgr", "set_mode", [mode])
        for node in resolve_nodes(target)
    ]
