import time

from convergence.operations import wait_for_bucket_type

from ..results.action_outcome import ActionOutcome
from ..runtime.scenario_runtime import ScenarioRuntime
from ..specs.action_spec import ActionSpec
from .params import require


async def run(runtime: ScenarioRuntime, action: ActionSpec) -> ActionOutcome:
    start = time.monotonic()
    bucket_type = require(action, "bucket_type")
    await wait_for_bucket_type(
        runtime.require_harness(),
        runtime.resolve_target(action.params),
        bucket_type,
    )
    return ActionOutcome(
        name="wait_for_bucket_type",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"bucket type {bucket_type}",
    )
