import time

from convergence.operations import write_objects

from ..results.action_outcome import ActionOutcome
from ..runtime.scenario_runtime import ScenarioRuntime
from ..specs.action_spec import ActionSpec
from .params import bucket_param


async def run(runtime: ScenarioRuntime, action: ActionSpec) -> ActionOutcome:
    start = time.monotonic()
    bucket = bucket_param(action)
    count = int(action.params.get("count", 1000))
    await write_objects(
        runtime.require_harness(),
        bucket,
        count=count,
        target=runtime.resolve_target(action.params),
    )
    return ActionOutcome(
        name="write_objects",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"wrote {count} objects to {bucket}",
    )
