import time

from convergence.operations import wait_for_search_count

from ..results.action_outcome import ActionOutcome
from ..runtime.scenario_runtime import ScenarioRuntime
from ..specs.action_spec import ActionSpec
from .params import require


async def run(runtime: ScenarioRuntime, action: ActionSpec) -> ActionOutcome:
    start = time.monotonic()
    index = require(action, "index")
    expected = int(require(action, "expected"))
    name = action.params.get("name", "*")
    term = action.params.get("term", "*")
    await wait_for_search_count(
        runtime.require_harness(),
        index,
        name,
        term,
        expected,
        target=runtime.resolve_target(action.params),
    )
    return ActionOutcome(
        name="search_expect",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"{name}:{term} on {index} returned {expected}",
    )
