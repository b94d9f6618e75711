from convergence.cluster import Node, Target
from convergence.conditions import Condition
from convergence.errors import OperationFailed
from convergence.harness import Harness
from convergence.logging.convergence_logging_models import OperationInfo
from convergence.polling import PollOutcome
from convergence.probes import HTTPProbe, HTTPRequest

from .urls import schema_url


def _as_bytes(raw: bytes | str) -> bytes:
    if isinstance(raw, str):
        return raw.encode("utf-8")

    return raw


async def store_schema(
    harness: Harness,
    name: str,
    raw: bytes | str,
    node: Node | None = None,
) -> None:
    if node is None:
        node = harness.cluster.nodes[0]

    await harness.logger.log(
        OperationInfo(
            message=f"Storing schema {name} [{node}]",
            operation="store_schema",
            node=node,
        )
    )

    response = await harness.http.put(
        schema_url(harness.cluster.http(node), name),
        headers={"content-type": "application/xml"},
        body=_as_bytes(raw),
    )
    if response.status != 204:
        raise OperationFailed(
            f"Schema PUT for {name} on {node} returned HTTP {response.status}, expected 204"
        )


async def wait_for_schema(
    harness: Harness,
    target: Target,
    name: str,
    content: bytes | str | None = None,
) -> list[PollOutcome]:
    """
    Wait until every node in ``target`` serves schema ``name``. When
    ``content`` is given the served bytes must match it exactly.
    """
    expected = _as_bytes(content) if content is not None else None

    def request_factory(node: Node) -> HTTPRequest:
        return HTTPRequest(
            method="GET",
            url=schema_url(harness.cluster.http(node), name),
        )

    probe = HTTPProbe(
        harness.http,
        request_factory,
        name=f"schema:{name}",
        logger=harness.logger,
    )

    def matches(response) -> bool:
        return expected is None or response.body == expected

    return await harness.wait_until(
        target,
        Condition.from_probe(f"schema {name} readable", probe, matches),
    )
