import asyncio
import json
import logging
import os
from datetime import datetime
from typing import List, Optional

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.browser.session import BrowserSessionManager
from ezyvet_qa.config import Settings
from ezyvet_qa.data.test_structures import ScenarioResult, TestStatus
from ezyvet_qa.executor.scenario import Scenario
from ezyvet_qa.utils.events import EventSink, LoggingEventSink


class ParallelScenarioExecutor:
    """Run scenarios concurrently, one isolated browser session each."""

    def __init__(self, settings: Settings, max_concurrent_scenarios: Optional[int] = None, events: EventSink = None):
        self.settings = settings
        self.max_concurrent_scenarios = max_concurrent_scenarios or settings.max_concurrent_scenarios
        self.session_manager = BrowserSessionManager()
        self.events = events or LoggingEventSink()

    async def run(self, scenarios: List[Scenario]) -> List[ScenarioResult]:
        """Execute scenarios and return one result per scenario, in input order."""
        if not scenarios:
            logging.warning("No scenarios to run")
            return []

        semaphore = asyncio.Semaphore(min(self.max_concurrent_scenarios, len(scenarios)))
        tasks = [asyncio.create_task(self._execute_single(scenario, semaphore)) for scenario in scenarios]
        try:
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        except asyncio.CancelledError:
            logging.warning("Scenario execution cancelled, closing sessions.")
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        finally:
            await self.session_manager.close_all_sessions()

        results = []
        for scenario, outcome in zip(scenarios, outcomes):
            if isinstance(outcome, BaseException):
                logging.error(f"Scenario {scenario.name} failed with exception: {outcome}")
                outcome = ScenarioResult(
                    scenario_name=scenario.name, status=TestStatus.FAILED, error_message=str(outcome)
                )
            results.append(outcome)
        return results

    async def _execute_single(self, scenario: Scenario, semaphore: asyncio.Semaphore) -> ScenarioResult:
        async with semaphore:
            logging.info(f"Starting scenario: {scenario.name}")
            session = None
            try:
                session = await self.session_manager.create_session(self.settings.browser_config())
                ui = UIContext(session.get_page(), self.settings.timeouts, self.events)
                result = await scenario.run(ui)
                result.session_id = session.session_id
                logging.info(f"Scenario {scenario.name} finished: {result.status.value}")
                return result
            except asyncio.CancelledError:
                logging.warning(f"Scenario cancelled: {scenario.name}")
                return ScenarioResult(
                    scenario_name=scenario.name, status=TestStatus.CANCELLED, error_message="Scenario was cancelled"
                )
            except Exception as e:
                error_msg = f"Scenario execution failed: {e}"
                logging.error(f"Scenario failed: {scenario.name} - {error_msg}")
                return ScenarioResult(scenario_name=scenario.name, status=TestStatus.FAILED, error_message=error_msg)
            finally:
                if session is not None:
                    await self.session_manager.close_session(session.session_id)


def generate_json_report(results: List[ScenarioResult], report_dir: str) -> str:
    """Write a JSON summary of the run and return its path."""
    os.makedirs(report_dir, exist_ok=True)
    passed = sum(1 for result in results if result.passed)
    report = {
        "generated_at": datetime.now().isoformat(),
        "count": {"total": len(results), "passed": passed, "failed": len(results) - passed},
        "scenarios": [result.model_dump(mode="json", exclude={"steps": {"__all__": {"output"}}}) for result in results],
    }
    report_path = os.path.join(report_dir, "scenario_report.json")
    with open(report_path, "w", encoding="utf-8") as f:
        json.dump(report, f, ensure_ascii=False, indent=2)
    logging.info(f"Report written to {report_path}")
    return report_path
