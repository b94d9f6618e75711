import time

from convergence.operations import wait_for_all_trees, wait_for_full_exchange_round

from ..results.action_outcome import ActionOutcome
from ..runtime.scenario_runtime import ScenarioRuntime
from ..specs.action_spec import ActionSpec


async def run_wait_for_all_trees(
    runtime: ScenarioRuntime,
    action: ActionSpec,
) -> ActionOutcome:
    start = time.monotonic()
    outcomes = await wait_for_all_trees(
        runtime.require_harness(),
        runtime.resolve_target(action.params),
    )
    return ActionOutcome(
        name="wait_for_all_trees",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"trees built on {len(outcomes)} nodes",
    )


async def run_wait_for_full_exchange_round(
    runtime: ScenarioRuntime,
    action: ActionSpec,
) -> ActionOutcome:
    start = time.monotonic()
    since = action.params.get("since")
    outcomes = await wait_for_full_exchange_round(
        runtime.require_harness(),
        runtime.resolve_target(action.params),
        since=float(since) if since is not None else None,
    )
    return ActionOutcome(
        name="wait_for_full_exchange_round",
        succeeded=True,
        duration_seconds=time.monotonic() - start,
        details=f"exchange round complete on {len(outcomes)} nodes",
    )
