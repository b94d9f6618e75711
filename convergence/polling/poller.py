import asyncio
import time
from typing import Awaitable, Callable

from convergence.cluster import Node
from convergence.conditions import Condition
from convergence.errors import ConvergenceTimeout, TransportError
from convergence.logging import Logger
from convergence.logging.convergence_logging_models import (
    PollDebug,
    PollError,
    PollInfo,
)

from .poll_config import PollConfig
from .poll_result import PollOutcome, PollResult

Sleep = Callable[[float], Awaitable[None]]


class Poller:
    """
    Fixed-interval retry engine for a single node.

    Example usage:
        poller = Poller(PollConfig(max_attempts=10, delay=1.0))

        outcome = await poller.poll_until("dev1", index_ready)
        if not outcome.converged:
            ...

        # or raise ConvergenceTimeout on exhaustion
        await poller.require("dev1", index_ready)
    """

    def __init__(
        self,
        config: PollConfig | None = None,
        logger: Logger | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config or PollConfig()
        self._logger = logger or Logger()
        self._sleep = sleep

    @property
    def config(self) -> PollConfig:
        return self._config

    async def poll_until(self, node: Node, condition: Condition) -> PollOutcome:
        """
        Evaluate ``condition`` against ``node`` until it holds or the
        attempt budget runs out.

        Returns as soon as the condition holds, without a trailing delay.
        A ``TransportError`` raised by the condition counts as "not yet".
        Any other exception propagates: it is a defect, not a timing issue.
        """
        max_attempts = self._config.max_attempts
        start = time.monotonic()
        last_error: TransportError | None = None

        for attempt in range(1, max_attempts + 1):
            try:
                satisfied = await condition(node)
                last_error = None

            except TransportError as err:
                satisfied = False
                last_error = err

            if satisfied:
                await self._logger.log(
                    PollInfo(
                        message=f"Condition '{condition.description}' holds on {node} after {attempt} attempt(s)",
                        node=node,
                        condition=condition.description,
                        attempt=attempt,
                        max_attempts=max_attempts,
                    )
                )

                return PollOutcome(
                    node=node,
                    description=condition.description,
                    result=PollResult.CONVERGED,
                    attempts=attempt,
                    duration_seconds=time.monotonic() - start,
                )

            await self._logger.log(
                PollDebug(
                    message=(
                        f"Condition '{condition.description}' not yet met on {node} "
                        f"(attempt {attempt}/{max_attempts})"
                        + (f": {last_error}" if last_error else "")
                    ),
                    node=node,
                    condition=condition.description,
                    attempt=attempt,
                    max_attempts=max_attempts,
                )
            )

            if attempt < max_attempts:
                await self._sleep(self._config.delay)

        await self._logger.log(
            PollError(
                message=f"Condition '{condition.description}' timed out on {node} after {max_attempts} attempts",
                node=node,
                condition=condition.description,
                attempt=max_attempts,
                max_attempts=max_attempts,
            )
        )

        return PollOutcome(
            node=node,
            description=condition.description,
            result=PollResult.TIMED_OUT,
            attempts=max_attempts,
            duration_seconds=time.monotonic() - start,
            last_error=last_error,
        )

    async def require(self, node: Node, condition: Condition) -> PollOutcome:
        outcome = await self.poll_until(node, condition)
        if not outcome.converged:
            raise ConvergenceTimeout(
                node,
                condition.description,
                outcome.attempts,
                last_error=outcome.last_error,
            )

        return outcome
