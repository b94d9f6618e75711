from __future__ import annotations

from typing import Callable, Dict, Literal, Union

from pydantic import BaseModel, StrictInt, StrictStr

from convergence.polling.poll_config import PollConfig

from .time_parser import TimeParser

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    CONVERGENCE_POLL_MAX_ATTEMPTS: StrictInt = 60
    CONVERGENCE_POLL_DELAY: StrictStr = "1s"
    CONVERGENCE_HTTP_TIMEOUT: StrictStr = "60s"
    CONVERGENCE_RPC_TIMEOUT: StrictStr = "60s"
    CONVERGENCE_RPC_PATH: StrictStr = "/rpc"
    CONVERGENCE_SOFTCOMMIT: StrictStr = "1s"
    CONVERGENCE_LOG_LEVEL: StrictStr = "info"
    CONVERGENCE_LOG_OUTPUT: Literal["stdout", "stderr"] = "stdout"
    CONVERGENCE_LOGS_DIRECTORY: StrictStr | None = None

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "CONVERGENCE_POLL_MAX_ATTEMPTS": int,
            "CONVERGENCE_POLL_DELAY": str,
            "CONVERGENCE_HTTP_TIMEOUT": str,
            "CONVERGENCE_RPC_TIMEOUT": str,
            "CONVERGENCE_RPC_PATH": str,
            "CONVERGENCE_SOFTCOMMIT": str,
            "CONVERGENCE_LOG_LEVEL": str,
            "CONVERGENCE_LOG_OUTPUT": str,
            "CONVERGENCE_LOGS_DIRECTORY": str,
        }

    def get_poll_config(self) -> PollConfig:
        """Get the default per-node polling budget from environment settings."""
        return PollConfig(
            max_attempts=self.CONVERGENCE_POLL_MAX_ATTEMPTS,
            delay=TimeParser().parse(self.CONVERGENCE_POLL_DELAY),
        )

    def get_http_timeout(self) -> float:
        return TimeParser().parse(self.CONVERGENCE_HTTP_TIMEOUT)

    def get_rpc_timeout(self) -> float:
        return TimeParser().parse(self.CONVERGENCE_RPC_TIMEOUT)

    def get_softcommit(self) -> float:
        return TimeParser().parse(self.CONVERGENCE_SOFTCOMMIT)
