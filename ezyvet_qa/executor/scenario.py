import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Tuple

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.data.test_structures import ScenarioResult, StepResult, TestStatus
from ezyvet_qa.utils import events as ev

StepFunc = Callable[[UIContext, Dict[str, Any]], Awaitable[Any]]


class Scenario:
    """A linear business flow; the first failing step ends it.

    Each step receives the page context and a state dict holding the return
    values of the steps before it, keyed by step name.
    """

    def __init__(self, name: str):
        self.name = name
        self.steps: List[Tuple[str, StepFunc]] = []

    def step(self, name: str, func: StepFunc) -> "Scenario":
        self.steps.append((name, func))
        return self

    async def run(self, ui: UIContext) -> ScenarioResult:
        result = ScenarioResult(scenario_name=self.name, status=TestStatus.RUNNING, start_time=datetime.now())
        result.steps = [StepResult(name=name) for name, _ in self.steps]
        state: Dict[str, Any] = {}

        try:
            for (name, func), step_result in zip(self.steps, result.steps):
                ui.events.emit(ev.STEP_STARTED, scenario=self.name, step=name)
                step_result.start()
                try:
                    output = await func(ui, state)
                except asyncio.CancelledError:
                    step_result.complete(success=False, error_message="Step was cancelled")
                    result.status = TestStatus.CANCELLED
                    result.error_message = f"Cancelled during step '{name}'"
                    raise
                except Exception as e:
                    error_msg = f"{type(e).__name__}: {e}"
                    step_result.complete(success=False, error_message=error_msg)
                    ui.events.emit(ev.STEP_FAILED, logging.ERROR, scenario=self.name, step=name, error=error_msg)
                    result.status = TestStatus.FAILED
                    result.error_message = f"Step '{name}' failed: {error_msg}"
                    break
                state[name] = output
                step_result.output = output
                step_result.complete(success=True)
            else:
                result.status = TestStatus.PASSED
        finally:
            for step_result in result.steps:
                if step_result.status == TestStatus.PENDING:
                    step_result.status = TestStatus.SKIPPED
            result.end_time = datetime.now()
            result.duration = (result.end_time - result.start_time).total_seconds()
            ui.events.emit(ev.SCENARIO_COMPLETED, scenario=self.name, status=result.status.value)

        return result
