from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx

from convergence.cluster import Cluster, Target
from convergence.conditions import Check, Condition
from convergence.env import Env
from convergence.logging import Logger, LoggingConfig
from convergence.polling import PollConfig, PollOutcome
from convergence.polling.poller import Sleep
from convergence.transport import HTTPClient, HTTPRemoteCaller, RemoteCaller
from convergence.verification import ConvergenceVerifier


@dataclass(slots=True)
class Harness:
    """
    Everything an operation needs to talk to one cluster: the cluster
    handle, the HTTP and RPC transports, the verifier and the logger.

    Example usage:
        async with Harness.create(cluster) as harness:
            await create_index_http(harness, "fruit")
            await write_objects(harness, "fruit")
            await commit(harness, harness.cluster, "fruit")
    """

    cluster: Cluster
    http: HTTPClient
    caller: RemoteCaller
    verifier: ConvergenceVerifier
    logger: Logger
    env: Env

    @classmethod
    def create(
        cls,
        cluster: Cluster,
        env: Env | None = None,
        caller: RemoteCaller | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
        poll_config: PollConfig | None = None,
        logger: Logger | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> Harness:
        if env is None:
            env = Env()

        LoggingConfig().update(
            log_directory=env.CONVERGENCE_LOGS_DIRECTORY,
            log_level=env.CONVERGENCE_LOG_LEVEL,
            log_output=env.CONVERGENCE_LOG_OUTPUT,
        )

        if logger is None:
            logger = Logger()

        http = HTTPClient(
            timeout=env.get_http_timeout(),
            transport=http_transport,
        )

        if caller is None:
            caller = HTTPRemoteCaller(
                cluster,
                http,
                path=env.CONVERGENCE_RPC_PATH,
                timeout=env.get_rpc_timeout(),
            )

        verifier = ConvergenceVerifier(
            poll_config or env.get_poll_config(),
            logger=logger,
            sleep=sleep,
        )

        return cls(
            cluster=cluster,
            http=http,
            caller=caller,
            verifier=verifier,
            logger=logger,
            env=env,
        )

    async def wait_until(
        self,
        target: Target,
        condition: Condition | Check,
        description: str | None = None,
    ) -> list[PollOutcome]:
        return await self.verifier.wait_until(target, condition, description=description)

    async def close(self) -> None:
        await self.http.close()
        await self.logger.close()

    async def __aenter__(self) -> Harness:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
