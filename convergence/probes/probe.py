"""
Node probes.

A probe issues exactly one observation against one node and classifies
the answer. Probes never raise ``TransportError``: an unreachable node or
an undecodable answer becomes ``ProbeTransportError`` so that the poller
can keep retrying while the target system restarts.
"""

from typing import Any, Awaitable, Callable, Sequence

import msgspec

from convergence.cluster import Node
from convergence.errors import TransportError
from convergence.logging import Logger
from convergence.logging.convergence_logging_models import ProbeTrace
from convergence.transport import HTTPClient, HTTPResponse, RemoteCaller

from .outcome import (
    ProbeNegative,
    ProbeOutcome,
    ProbeTransportError,
    ProbeValue,
    describe_outcome,
)


class HTTPRequest(msgspec.Struct, kw_only=True):
    method: str
    url: str
    headers: dict[str, str] = msgspec.field(default_factory=dict)
    body: bytes | None = None
    timeout: float | None = None


RequestFactory = Callable[[Node], HTTPRequest]
HTTPInterpreter = Callable[[HTTPResponse], ProbeOutcome]
ResultInterpreter = Callable[[Any], ProbeOutcome]


def interpret_success_status(response: HTTPResponse) -> ProbeOutcome:
    if response.ok:
        return ProbeValue(response)

    return ProbeNegative(f"HTTP {response.status}")


def interpret_defined_result(result: Any) -> ProbeOutcome:
    if result is None:
        return ProbeNegative("undefined")

    return ProbeValue(result)


class Probe:
    name: str = "probe"

    def __init__(self, logger: Logger | None = None) -> None:
        self._logger = logger

    async def __call__(self, node: Node) -> ProbeOutcome:
        try:
            outcome = await self.observe(node)

        except TransportError as err:
            outcome = ProbeTransportError(err)

        except msgspec.DecodeError as err:
            outcome = ProbeTransportError(
                TransportError(f"Undecodable answer from {node}: {err}", cause=err)
            )

        if self._logger is not None:
            await self._logger.log(
                ProbeTrace(
                    message=f"Probe {self.name} on {node}: {describe_outcome(outcome)}",
                    node=node,
                    probe=self.name,
                    outcome=describe_outcome(outcome),
                )
            )

        return outcome

    async def observe(self, node: Node) -> ProbeOutcome:
        raise NotImplementedError("Probe subclasses must implement observe()")


class HTTPProbe(Probe):
    def __init__(
        self,
        client: HTTPClient,
        request_factory: RequestFactory,
        interpret: HTTPInterpreter = interpret_success_status,
        name: str = "http",
        logger: Logger | None = None,
    ) -> None:
        super().__init__(logger=logger)
        self._client = client
        self._request_factory = request_factory
        self._interpret = interpret
        self.name = name

    async def observe(self, node: Node) -> ProbeOutcome:
        request = self._request_factory(node)
        response = await self._client.request(
            request.method,
            request.url,
            headers=request.headers,
            body=request.body,
            timeout=request.timeout,
        )

        return self._interpret(response)


class RemoteCallProbe(Probe):
    def __init__(
        self,
        caller: RemoteCaller,
        module: str,
        function: str,
        args: Sequence[Any] | None = None,
        interpret: ResultInterpreter = interpret_defined_result,
        timeout: float | None = None,
        logger: Logger | None = None,
    ) -> None:
        super().__init__(logger=logger)
        self._caller = caller
        self._module = module
        self._function = function
        self._args = list(args or [])
        self._interpret = interpret
        self._timeout = timeout
        self.name = f"{module}:{function}"

    async def observe(self, node: Node) -> ProbeOutcome:
        result = await self._caller.call(
            node,
            self._module,
            self._function,
            args=self._args,
            timeout=self._timeout,
        )

        return self._interpret(result)


class FunctionProbe(Probe):
    """Wraps an async ``node -> outcome`` function, e.g. a multi-call observation."""

    def __init__(
        self,
        observe: Callable[[Node], Awaitable[ProbeOutcome]],
        name: str = "function",
        logger: Logger | None = None,
    ) -> None:
        super().__init__(logger=logger)
        self._observe = observe
        self.name = name

    async def observe(self, node: Node) -> ProbeOutcome:
        return await self._observe(node)
