import asyncio
from pathlib import Path

from ..results.scenario_outcome import ScenarioOutcome
from ..results.scenario_result import ScenarioResult
from ..runtime.scenario_runtime import HarnessFactory, create_harness
from ..specs.scenario_spec import ScenarioSpec
from .scenario_runner import ScenarioRunner


async def run_from_json(
    path: str | Path,
    harness_factory: HarnessFactory = create_harness,
) -> ScenarioOutcome:
    loop = asyncio.get_running_loop()
    spec = await loop.run_in_executor(None, ScenarioSpec.from_json, Path(path))
    runner = ScenarioRunner(harness_factory=harness_factory)
    outcome = await runner.run(spec)
    if outcome.result != ScenarioResult.PASSED:
        raise AssertionError(outcome.error or "Scenario failed")

    return outcome
