from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class TestStatus(str, Enum):
    __test__ = False

    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


class StepResult(BaseModel):
    name: str
    status: TestStatus = TestStatus.PENDING
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[float] = None
    error_message: str = ""
    output: Any = None

    def start(self):
        self.status = TestStatus.RUNNING
        self.start_time = datetime.now()

    def complete(self, success: bool, error_message: str = ""):
        self.end_time = datetime.now()
        if self.start_time:
            self.duration = (self.end_time - self.start_time).total_seconds()
        self.status = TestStatus.PASSED if success else TestStatus.FAILED
        self.error_message = error_message


class ScenarioResult(BaseModel):
    scenario_name: str
    status: TestStatus = TestStatus.PENDING
    session_id: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[float] = None
    steps: List[StepResult] = Field(default_factory=list)
    error_message: str = ""

    # pytest would otherwise try to collect these as test classes
    __test__ = False

    @property
    def passed(self) -> bool:
        return self.status == TestStatus.PASSED

    def failed_step(self) -> Optional[StepResult]:
        for step in self.steps:
            if step.status == TestStatus.FAILED:
                return step
        return None

    def raise_for_status(self):
        if self.status != TestStatus.PASSED:
            raise AssertionError(f"Scenario '{self.scenario_name}' {self.status.value}: {self.error_message}")
