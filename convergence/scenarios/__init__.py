from .actions import (
    ActionRegistry as ActionRegistry,
    build_default_registry as build_default_registry,
)
from .results import (
    ActionOutcome as ActionOutcome,
    ScenarioOutcome as ScenarioOutcome,
    ScenarioResult as ScenarioResult,
)
from .runner import (
    ScenarioRunner as ScenarioRunner,
    run_from_json as run_from_json,
)
from .runtime import ScenarioRuntime as ScenarioRuntime
from .specs import ActionSpec as ActionSpec, ScenarioSpec as ScenarioSpec
