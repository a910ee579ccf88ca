from .parallel_executor import ParallelScenarioExecutor, generate_json_report
from .scenario import Scenario
from .scenarios import SCENARIOS, build_configured_scenario, build_scenario, validate_scenario_names

__all__ = [
    "Scenario",
    "SCENARIOS",
    "build_scenario",
    "build_configured_scenario",
    "validate_scenario_names",
    "ParallelScenarioExecutor",
    "generate_json_report",
]
