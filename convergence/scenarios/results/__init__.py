from .action_outcome import ActionOutcome as ActionOutcome
from .scenario_outcome import ScenarioOutcome as ScenarioOutcome
from .scenario_result import ScenarioResult as ScenarioResult
