import time

from convergence.operations import wait_for_index

from ..results.action_outcome import ActionOutcome
from ..runtime.scenario_runtime import ScenarioRuntime
from ..specs.action_spec import ActionSpec
from .params import require


async def run(runtime: ScenarioRuntime, action: ActionSpec) -> ActionOutcome:
    start = time.monotonic()
    index = require(action, "index")
    outcomes = await wait_for_index(
        runtime.require_harness(),
        runtime.resolve_target(action.params),
        index,
    )
    return ActionOutcome(
        name="wait_for_index",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"index {index} available on {len(outcomes)} nodes",
    )
