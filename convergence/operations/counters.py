from typing import NamedTuple

from convergence.cluster import Target, resolve_nodes
from convergence.errors import OperationFailed
from convergence.harness import Harness
from convergence.logging.convergence_logging_models import OperationInfo
from convergence.transport import multicall


class CallSignature(NamedTuple):
    module: str
    function: str
    arity: int

    def __str__(self) -> str:
        return f"{self.module}:{self.function}/{self.arity}"


async def count_calls(harness: Harness, target: Target, signature: CallSignature) -> None:
    """Start counting calls to ``signature`` on every node, from zero."""
    nodes = resolve_nodes(target)

    await harness.logger.log(
        OperationInfo(
            message=f"count all calls to {signature} across the cluster {nodes}",
            operation="count_calls",
        )
    )

    _, bad_nodes = await multicall(
        harness.caller,
        nodes,
        "yz_rt_counters",
        "reset",
        list(signature),
    )
    if bad_nodes:
        raise OperationFailed(f"Could not start counting {signature} on {bad_nodes}")


async def get_call_count(harness: Harness, target: Target, signature: CallSignature) -> int:
    """
    Total number of calls to ``signature`` across ``target`` since
    ``count_calls``. A node that has not counted anything contributes 0.
    """
    replies, bad_nodes = await multicall(
        harness.caller,
        resolve_nodes(target),
        "yz_rt_counters",
        "get",
        list(signature),
    )
    if bad_nodes:
        raise OperationFailed(f"Could not read call count for {signature} on {bad_nodes}")

    return sum(int(count or 0) for count in replies.values())
