import asyncio

from convergence.cluster import Target, resolve_nodes
from convergence.conditions import Check, Condition
from convergence.errors import ConvergenceTimeout
from convergence.logging import Logger
from convergence.logging.convergence_logging_models import (
    VerifierError,
    VerifierInfo,
)
from convergence.polling import PollConfig, Poller, PollOutcome
from convergence.polling.poller import Sleep


class ConvergenceVerifier:
    """
    Lifts the poller to a set of nodes.

    Every node gets its own polling loop and its own attempt budget, and
    the loops run concurrently, so one slow node never delays proving
    convergence on the others. Success is all-or-nothing: the call returns
    only when every node converged and raises ``ConvergenceTimeout`` if any
    node exhausted its budget.
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
        self._poller = Poller(self._config, logger=self._logger, sleep=sleep)

    @property
    def config(self) -> PollConfig:
        return self._config

    @property
    def poller(self) -> Poller:
        return self._poller

    @property
    def logger(self) -> Logger:
        return self._logger

    @property
    def sleep(self) -> Sleep:
        return self._sleep

    def with_config(self, config: PollConfig) -> "ConvergenceVerifier":
        return ConvergenceVerifier(config, logger=self._logger, sleep=self._sleep)

    async def wait_until(
        self,
        target: Target,
        condition: Condition | Check,
        description: str | None = None,
    ) -> list[PollOutcome]:
        if not isinstance(condition, Condition):
            condition = Condition(
                description=description or getattr(condition, "__name__", "condition"),
                check=condition,
            )

        nodes = resolve_nodes(target)

        await self._logger.log(
            VerifierInfo(
                message=f"Waiting for '{condition.description}' on {nodes}",
                nodes=nodes,
                condition=condition.description,
            )
        )

        tasks = [
            asyncio.create_task(self._poller.poll_until(node, condition))
            for node in nodes
        ]

        try:
            outcomes: list[PollOutcome] = await asyncio.gather(*tasks)

        finally:
            # A condition that raised leaves the other pollers running.
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()

            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        failed = [outcome for outcome in outcomes if not outcome.converged]
        if failed:
            failed_nodes = [outcome.node for outcome in failed]

            await self._logger.log(
                VerifierError(
                    message=f"'{condition.description}' did not converge on {failed_nodes}",
                    nodes=nodes,
                    failed_nodes=failed_nodes,
                    condition=condition.description,
                )
            )

            first_failure = failed[0]
            raise ConvergenceTimeout(
                first_failure.node,
                condition.description,
                first_failure.attempts,
                failed_nodes=failed_nodes,
                last_error=first_failure.last_error,
            )

        await self._logger.log(
            VerifierInfo(
                message=f"'{condition.description}' converged on {nodes}",
                nodes=nodes,
                condition=condition.description,
            )
        )

        return outcomes
