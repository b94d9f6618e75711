import time

from convergence.operations import wait_for_schema

from ..results.action_outcome import ActionOutcome
from ..runtime.scenario_runtime import ScenarioRuntime
from ..specs.action_spec import ActionSpec
from .params import require


async def run(runtime: ScenarioRuntime, action: ActionSpec) -> ActionOutcome:
    start = time.monotonic()
    name = require(action, "schema")
    await wait_for_schema(
        runtime.require_harness(),
        runtime.resolve_target(action.params),
        name,
        content=action.params.get("content"),
    )
    return ActionOutcome(
        name="wait_for_schema",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"schema {name}",
    )
