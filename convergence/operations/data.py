import random
import string
from typing import Sequence, TypeVar

import orjson

from convergence.cluster import Endpoint, Node, Target, resolve_nodes
from convergence.errors import OperationFailed
from convergence.harness import Harness
from convergence.logging.convergence_logging_models import (
    OperationDebug,
    OperationError,
    OperationInfo,
)
from convergence.transport import multicall

from .urls import Bucket, object_url

T = TypeVar("T")

RANDOM_CHARS = string.ascii_lowercase + string.digits


def select_random(items: Sequence[T], rng: random.Random | None = None) -> T:
    if not items:
        raise ValueError("Cannot select from an empty sequence")

    return (rng or random).choice(items)


def random_binary(length: int, rng: random.Random | None = None) -> bytes:
    if length < 1:
        raise ValueError("random_binary requires a length of at least 1")

    rng = rng or random
    return "".join(rng.choice(RANDOM_CHARS) for _ in range(length)).encode()


def int_to_key(value: int) -> bytes:
    return str(value).encode()


def random_keys(
    max_key: int,
    count: int | None = None,
    rng: random.Random | None = None,
) -> list[bytes]:
    """
    Up to ``count`` distinct keys drawn from ``1..max_key``, sorted. With no
    ``count`` between 5 and 104 keys are drawn.
    """
    rng = rng or random
    if count is None:
        count = 4 + rng.randint(1, 100)

    return sorted({int_to_key(rng.randint(1, max_key)) for _ in range(count)})


def generate_keys(seq_max: int) -> list[bytes]:
    """
    Keys ``1..seq_max`` as 8-byte big-endian integers, skipping any key with
    a byte above 127: the index only accepts UTF-8 compatible keys.
    """
    keys: list[bytes] = []
    for value in range(1, seq_max + 1):
        key = value.to_bytes(8, "big")
        if all(byte <= 127 for byte in key):
            keys.append(key)

    return keys


async def http_put(
    harness: Harness,
    endpoint: Endpoint,
    bucket: Bucket,
    key: str,
    value: bytes | str,
    content_type: str = "text/plain",
) -> None:
    response = await harness.http.put(
        object_url(endpoint, bucket, key),
        headers={"content-type": content_type},
        body=value,
    )
    if response.status != 204:
        raise OperationFailed(
            f"PUT of {bucket}/{key} to {endpoint} returned HTTP {response.status}, expected 204"
        )


async def write_objects(
    harness: Harness,
    bucket: Bucket,
    count: int = 1000,
    target: Target | None = None,
    rng: random.Random | None = None,
) -> None:
    """
    Write ``count`` JSON objects ``{"name_s": "yokozuna", "num_i": n}``
    under keys ``key_1 .. key_<count>``, each one to the HTTP endpoint of
    a randomly chosen node.
    """
    if target is None:
        target = harness.cluster

    endpoints = [harness.cluster.http(node) for node in resolve_nodes(target)]

    await harness.logger.log(
        OperationInfo(
            message=f"Writing {count} objects",
            operation="write_objects",
        )
    )

    for number in range(1, count + 1):
        key = f"key_{number}"
        endpoint = select_random(endpoints, rng=rng)

        await harness.logger.log(
            OperationDebug(
                message=f"Writing object with bkey {(bucket, key)} [{endpoint}]",
                operation="write_objects",
            )
        )

        await http_put(
            harness,
            endpoint,
            bucket,
            key,
            orjson.dumps({"name_s": "yokozuna", "num_i": number}),
            content_type="application/json",
        )


async def commit(
    harness: Harness,
    target: Target,
    index: str,
    softcommit: float | None = None,
) -> list[Node]:
    """
    Sleep the soft commit interval so the engine picks up recent writes,
    then force a commit of ``index`` on every node. Returns the nodes that
    could not be reached.
    """
    if softcommit is None:
        softcommit = harness.env.get_softcommit()

    await harness.verifier.sleep(softcommit)

    await harness.logger.log(
        OperationInfo(
            message=f"Commit search writes to {index} at softcommit (default) {softcommit}",
            operation="commit",
        )
    )

    _, bad_nodes = await multicall(
        harness.caller,
        resolve_nodes(target),
        "yz_solr",
        "commit",
        [index],
    )

    if bad_nodes:
        await harness.logger.log(
            OperationError(
                message=f"Commit of {index} failed on {bad_nodes}",
                operation="commit",
            )
        )

    return bad_nodes


async def drain_queues(harness: Harness, target: Target) -> list[Node]:
    """Drain the index queues on every node. Returns the nodes that could not be reached."""
    nodes = resolve_nodes(target)

    await harness.logger.log(
        OperationInfo(
            message=f"Draining index queues on {nodes}",
            operation="drain_queues",
        )
    )

    _, bad_nodes = await multicall(
        harness.caller,
        nodes,
        "yz_solrq_drain_mgr",
        "drain",
        [],
    )

    if bad_nodes:
        await harness.logger.log(
            OperationError(
                message=f"Draining index queues failed on {bad_nodes}",
                operation="drain_queues",
            )
        )

    return bad_nodes
