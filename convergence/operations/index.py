from typing import Any

from convergence.cluster import Node, Target
from convergence.conditions import Condition
from convergence.errors import OperationFailed
from convergence.harness import Harness
from convergence.logging.convergence_logging_models import OperationInfo
from convergence.polling import PollOutcome
from convergence.probes import HTTPProbe, HTTPRequest, RemoteCallProbe

from .schema import store_schema
from .urls import bucket_type_url, index_url

INDEX_PROPERTY = "search_index"
INDEX_TOMBSTONE = "_dont_index_"


def _expect_ok(result: Any, operation: str, node: Node) -> None:
    if result != "ok":
        raise OperationFailed(f"{operation} on {node} returned {result!r}, expected 'ok'")


async def create_index(
    harness: Harness,
    node: Node,
    index: str,
    schema: str | None = None,
    n_val: int | None = None,
) -> None:
    args: list[Any] = [index]
    description = f"Creating index {index}"
    if schema is not None:
        args.append(schema)
        description += f" with schema {schema}"

    if n_val is not None:
        if schema is None:
            raise ValueError("n_val requires an explicit schema")

        args.append(n_val)
        description += f" and n_val: {n_val}"

    await harness.logger.log(
        OperationInfo(
            message=f"{description} [{node}]",
            operation="create_index",
            node=node,
        )
    )

    result = await harness.caller.call(node, "yz_index", "create", args)
    _expect_ok(result, "create_index", node)


async def create_index_http(
    harness: Harness,
    index: str,
    node: Node | None = None,
) -> None:
    """
    Create ``index`` through the HTTP API of ``node`` (the first cluster
    node by default), associate it with the bucket type of the same name,
    and wait until every node sees the bucket type.
    """
    if node is None:
        node = harness.cluster.nodes[0]

    await harness.logger.log(
        OperationInfo(
            message=f"create_index {index} [{node}]",
            operation="create_index_http",
            node=node,
        )
    )

    response = await harness.http.put(
        index_url(harness.cluster.http(node), index),
        headers={"content-type": "application/json"},
        body=b"",
    )
    if response.status != 204:
        raise OperationFailed(
            f"Index PUT for {index} on {node} returned HTTP {response.status}, expected 204"
        )

    await set_bucket_type_index(harness, node, index)
    await wait_for_bucket_type(harness, harness.cluster, index)


async def create_indexed_bucket(
    harness: Harness,
    bucket_type: str,
    index: str,
    n_val: int = 1,
    node: Node | None = None,
) -> None:
    if node is None:
        node = harness.cluster.nodes[0]

    response = await harness.http.put(
        index_url(harness.cluster.http(node), index),
        headers={"content-type": "application/json"},
        body=f'{{"n_val": {n_val}}}',
    )
    if response.status != 204:
        raise OperationFailed(
            f"Index PUT for {index} on {node} returned HTTP {response.status}, expected 204"
        )

    await set_bucket_type_index(harness, node, bucket_type, index=index, n_val=n_val)


async def wait_for_index(
    harness: Harness,
    target: Target,
    index: str,
) -> list[PollOutcome]:
    probe = RemoteCallProbe(
        harness.caller,
        "yz_solr",
        "ping",
        [index],
        logger=harness.logger,
    )

    return await harness.wait_until(
        target,
        Condition.from_probe(
            f"index {index} available",
            probe,
            lambda result: result is True or result == "ok",
        ),
    )


async def create_bucket_type(
    harness: Harness,
    node: Node,
    bucket_type: str,
    props: dict[str, Any] | None = None,
) -> None:
    props = props or {}

    await harness.logger.log(
        OperationInfo(
            message=f"Creating bucket type {bucket_type} with {props} [{node}]",
            operation="create_bucket_type",
            node=node,
        )
    )

    result = await harness.caller.call(
        node,
        "riak_core_bucket_type",
        "create",
        [bucket_type, props],
    )
    _expect_ok(result, "create_bucket_type", node)

    await wait_until_bucket_type_status(harness, node, bucket_type, "ready")

    result = await harness.caller.call(
        node,
        "riak_core_bucket_type",
        "activate",
        [bucket_type],
    )
    _expect_ok(result, "activate_bucket_type", node)

    await wait_until_bucket_type_status(harness, node, bucket_type, "active")


async def wait_until_bucket_type_status(
    harness: Harness,
    target: Target,
    bucket_type: str,
    status: str,
) -> list[PollOutcome]:
    probe = RemoteCallProbe(
        harness.caller,
        "riak_core_bucket_type",
        "status",
        [bucket_type],
        logger=harness.logger,
    )

    return await harness.wait_until(
        target,
        Condition.from_probe(
            f"bucket type {bucket_type} {status}",
            probe,
            lambda result: result == status,
        ),
    )


async def wait_for_bucket_type(
    harness: Harness,
    target: Target,
    bucket_type: str,
) -> list[PollOutcome]:
    def request_factory(node: Node) -> HTTPRequest:
        return HTTPRequest(
            method="GET",
            url=bucket_type_url(harness.cluster.http(node), bucket_type),
        )

    probe = HTTPProbe(
        harness.http,
        request_factory,
        name=f"bucket_type:{bucket_type}",
        logger=harness.logger,
    )

    return await harness.wait_until(
        target,
        Condition.from_probe(f"bucket type {bucket_type} visible", probe),
    )


async def set_bucket_type_index(
    harness: Harness,
    node: Node,
    bucket_type: str,
    index: str | None = None,
    n_val: int | None = None,
) -> None:
    if index is None:
        index = bucket_type

    await harness.logger.log(
        OperationInfo(
            message=f"Set bucket type {bucket_type} index to {index} [{node}]",
            operation="set_bucket_type_index",
            node=node,
        )
    )

    props: dict[str, Any] = {INDEX_PROPERTY: index}
    if n_val is not None:
        props["n_val"] = n_val

    await create_bucket_type(harness, node, bucket_type, props)


async def create_indexed_bucket_type(
    harness: Harness,
    node: Node,
    bucket_type: str,
    index: str,
    schema: str | None = None,
    raw_schema: bytes | str | None = None,
) -> None:
    if raw_schema is not None:
        if schema is None:
            raise ValueError("raw_schema requires a schema name")

        await store_schema(harness, schema, raw_schema, node=node)

    await create_index(harness, node, index, schema=schema)
    await create_bucket_type(harness, node, bucket_type, {INDEX_PROPERTY: index})


async def set_bucket_index(
    harness: Harness,
    node: Node,
    bucket: str,
    index: str,
    n_val: int | None = None,
) -> Any:
    props: dict[str, Any] = {INDEX_PROPERTY: index}
    if n_val is not None:
        props["n_val"] = n_val

    return await harness.caller.call(
        node,
        "riak_core_bucket",
        "set_bucket",
        [bucket, props],
    )


async def remove_index(harness: Harness, node: Node, bucket_type: str) -> None:
    await harness.logger.log(
        OperationInfo(
            message=f"Remove index from bucket type {bucket_type} [{node}]",
            operation="remove_index",
            node=node,
        )
    )

    result = await harness.caller.call(
        node,
        "riak_core_bucket_type",
        "update",
        [bucket_type, {INDEX_PROPERTY: INDEX_TOMBSTONE}],
    )
    _expect_ok(result, "remove_index", node)
