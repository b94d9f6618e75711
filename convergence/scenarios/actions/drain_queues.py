import time

from convergence.operations import drain_queues

from ..results.action_outcome import ActionOutcome
from ..runtime.scenario_runtime import ScenarioRuntime
from ..specs.action_spec import ActionSpec


async def run(runtime: ScenarioRuntime, action: ActionSpec) -> ActionOutcome:
    start = time.monotonic()
    bad_nodes = await drain_queues(
        runtime.require_harness(),
        runtime.resolve_target(action.params),
    )
    return ActionOutcome(
        name="drain_queues",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"drained, unreachable: {bad_nodes}",
    )
