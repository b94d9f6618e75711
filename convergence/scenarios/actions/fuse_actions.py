import time

from convergence.operations import wait_until_fuses_blown, wait_until_fuses_reset

from ..results.action_outcome import ActionOutcome
from ..runtime.scenario_runtime import ScenarioRuntime
from ..specs.action_spec import ActionSpec
from .params import require


async def run_wait_until_fuses_blown(
    runtime: ScenarioRuntime,
    action: ActionSpec,
) -> ActionOutcome:
    start = time.monotonic()
    indices = list(require(action, "indices"))
    await wait_until_fuses_blown(
        runtime.require_harness(),
        runtime.resolve_target(action.params),
        require(action, "solrq_id"),
        indices,
    )
    return ActionOutcome(
        name="wait_until_fuses_blown",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"fuses blown for {indices}",
    )


async def run_wait_until_fuses_reset(
    runtime: ScenarioRuntime,
    action: ActionSpec,
) -> ActionOutcome:
    start = time.monotonic()
    indices = list(require(action, "indices"))
    await wait_until_fuses_reset(
        runtime.require_harness(),
        runtime.resolve_target(action.params),
        require(action, "solrq_id"),
        indices,
    )
    return ActionOutcome(
        name="wait_until_fuses_reset",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"fuses reset for {indices}",
    )
