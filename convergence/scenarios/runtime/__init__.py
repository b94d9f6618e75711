from .scenario_runtime import (
    HarnessFactory as HarnessFactory,
    ScenarioRuntime as ScenarioRuntime,
    create_harness as create_harness,
)
