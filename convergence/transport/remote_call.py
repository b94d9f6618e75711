import asyncio
from typing import Any, Protocol, Sequence

import msgspec
import orjson

from convergence.cluster import Cluster, Node
from convergence.errors import RemoteCallError, TransportError

from .http_client import HTTPClient
from .models import RemoteCallReply, RemoteCallRequest


class RemoteCaller(Protocol):
    async def call(
        self,
        node: Node,
        module: str,
        function: str,
        args: Sequence[Any] | None = None,
        timeout: float | None = None,
    ) -> Any: ...


class HTTPRemoteCaller:
    """
    Invokes administrative functions on a node over JSON/HTTP.

    The request body is ``{"module": ..., "function": ..., "args": [...]}``
    posted to the node's admin endpoint. The node answers with
    ``{"result": ...}`` or ``{"error": ...}``. A ``null`` result is the
    remote side saying "undefined" and is returned as ``None``.
    """

    def __init__(
        self,
        cluster: Cluster,
        http: HTTPClient,
        path: str = "/rpc",
        timeout: float | None = None,
    ) -> None:
        self._cluster = cluster
        self._http = http
        self._path = path
        self._timeout = timeout

    async def call(
        self,
        node: Node,
        module: str,
        function: str,
        args: Sequence[Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        if timeout is None:
            timeout = self._timeout

        request = RemoteCallRequest(
            module=module,
            function=function,
            args=list(args or []),
        )

        url = f"{self._cluster.admin(node).base_url}{self._path}"
        response = await self._http.request(
            "POST",
            url,
            headers={"content-type": "application/json"},
            body=orjson.dumps(msgspec.structs.asdict(request)),
            timeout=timeout,
        )

        if response.status != 200:
            raise RemoteCallError(
                node,
                module,
                function,
                f"HTTP {response.status}: {response.text()}",
            )

        try:
            reply = RemoteCallReply(**orjson.loads(response.body))

        except (orjson.JSONDecodeError, TypeError) as err:
            raise RemoteCallError(
                node,
                module,
                function,
                "malformed reply",
                cause=err,
            ) from err

        if reply.error is not None:
            raise RemoteCallError(node, module, function, reply.error)

        return reply.result


async def multicall(
    caller: RemoteCaller,
    nodes: Sequence[Node],
    module: str,
    function: str,
    args: Sequence[Any] | None = None,
    timeout: float | None = None,
) -> tuple[dict[Node, Any], list[Node]]:
    """
    Call the same function on every node concurrently.

    Returns the results by node and the list of nodes whose call failed
    at the transport level.
    """
    results = await asyncio.gather(
        *[
            caller.call(node, module, function, args=args, timeout=timeout)
            for node in nodes
        ],
        return_exceptions=True,
    )

    replies: dict[Node, Any] = {}
    bad_nodes: list[Node] = []
    for node, result in zip(nodes, results):
        if isinstance(result, TransportError):
            bad_nodes.append(node)

        elif isinstance(result, BaseException):
            raise result

        else:
            replies[node] = result

    return replies, bad_nodes
