import time

from convergence.env import TimeParser
from convergence.operations import commit

from ..results.action_outcome import ActionOutcome
from ..runtime.scenario_runtime import ScenarioRuntime
from ..specs.action_spec import ActionSpec
from .params import require


async def run(runtime: ScenarioRuntime, action: ActionSpec) -> ActionOutcome:
    start = time.monotonic()
    index = require(action, "index")
    softcommit = action.params.get("softcommit")
    bad_nodes = await commit(
        runtime.require_harness(),
        runtime.resolve_target(action.params),
        index,
        softcommit=TimeParser().parse(softcommit) if softcommit is not None else None,
    )
    return ActionOutcome(
        name="commit",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"committed {index}, unreachable: {bad_nodes}",
    )
