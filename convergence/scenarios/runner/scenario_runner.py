import asyncio
import time

from convergence.logging import LoggingConfig
from convergence.logging.convergence_logging_models import (
    OperationError,
    OperationInfo,
)

from ..actions.action_registry import ActionRegistry
from ..actions.default_registry import build_default_registry
from ..results.scenario_outcome import ScenarioOutcome
from ..results.scenario_result import ScenarioResult
from ..runtime.scenario_runtime import HarnessFactory, ScenarioRuntime, create_harness
from ..specs.scenario_spec import ScenarioSpec


class ScenarioRunner:
    def __init__(
        self,
        registry: ActionRegistry | None = None,
        harness_factory: HarnessFactory = create_harness,
    ) -> None:
        self._registry = registry or build_default_registry()
        self._harness_factory = harness_factory

    async def run(self, spec: ScenarioSpec) -> ScenarioOutcome:
        runtime = ScenarioRuntime(spec=spec, harness_factory=self._harness_factory)
        start = time.monotonic()
        outcome = ScenarioOutcome(
            name=spec.name,
            result=ScenarioResult.PASSED,
            duration_seconds=0.0,
        )

        try:
            await runtime.start()

            # Applied after the harness so scenario settings win over env.
            if spec.logging:
                LoggingConfig().update(
                    log_directory=spec.logging.get("log_directory"),
                    log_level=spec.logging.get("log_level"),
                    log_output=spec.logging.get("log_output"),
                )

            logger = runtime.require_harness().logger

            for index, action in enumerate(spec.actions, start=1):
                handler = self._registry.get(action.action_type)
                action_timeout = action.timeout_seconds
                if action_timeout is None:
                    action_timeout = spec.timeouts.get(action.action_type)

                if action_timeout is None:
                    action_timeout = spec.default_action_timeout_seconds

                await logger.log(
                    OperationInfo(
                        message=f"Scenario {spec.name}: action {index} '{action.action_type}'",
                        operation=action.action_type,
                    )
                )

                action_started = time.monotonic()
                try:
                    if action_timeout:
                        result = await asyncio.wait_for(
                            handler(runtime, action), timeout=action_timeout
                        )

                    else:
                        result = await handler(runtime, action)

                except asyncio.TimeoutError as error:
                    elapsed = time.monotonic() - action_started
                    raise AssertionError(
                        f"Action '{action.action_type}' timed out after {elapsed:.2f}s "
                        f"(index {index}, params={action.params})"
                    ) from error

                outcome.actions.append(result)
                if spec.scenario_timeout_seconds is not None:
                    elapsed = time.monotonic() - start
                    if elapsed > spec.scenario_timeout_seconds:
                        raise AssertionError(
                            "Scenario timeout exceeded after "
                            f"{elapsed:.2f}s (limit {spec.scenario_timeout_seconds:.2f}s)"
                        )

            outcome.duration_seconds = time.monotonic() - start

        except Exception as error:
            outcome.result = ScenarioResult.FAILED
            outcome.error = str(error)
            outcome.duration_seconds = time.monotonic() - start

            if runtime.harness is not None:
                await runtime.harness.logger.log(
                    OperationError(
                        message=f"Scenario {spec.name} failed: {error}",
                        operation="scenario",
                    )
                )

        finally:
            await runtime.stop()

        return outcome
