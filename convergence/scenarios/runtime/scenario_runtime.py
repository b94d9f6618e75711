from dataclasses import dataclass, field
import time
from typing import Callable

from convergence.cluster import Node, Target
from convergence.harness import Harness

from ..specs.scenario_spec import ScenarioSpec

HarnessFactory = Callable[[ScenarioSpec], Harness]


def create_harness(spec: ScenarioSpec) -> Harness:
    return Harness.create(spec.cluster, poll_config=spec.poll)


@dataclass(slots=True)
class ScenarioRuntime:
    spec: ScenarioSpec
    harness_factory: HarnessFactory = create_harness
    harness: Harness | None = None
    started_at: float = field(default_factory=time.monotonic)

    async def start(self) -> None:
        if self.harness:
            raise RuntimeError("Harness already started")

        self.harness = self.harness_factory(self.spec)

    async def stop(self) -> None:
        if not self.harness:
            return

        await self.harness.close()
        self.harness = None

    def require_harness(self) -> Harness:
        if not self.harness:
            raise RuntimeError("Harness not started")

        return self.harness

    def resolve_target(self, params: dict) -> Target:
        """The ``nodes`` param if given, the whole cluster otherwise."""
        harness = self.require_harness()
        nodes: list[Node] | None = params.get("nodes")
        if nodes is None:
            return harness.cluster

        unknown = [node for node in nodes if node not in harness.cluster]
        if unknown:
            raise ValueError(f"Unknown nodes {unknown}")

        return nodes
