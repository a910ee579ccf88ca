from .records import (
    AppointmentRecord,
    ContactRecord,
    ContactType,
    EntityKind,
    OutcomeSignal,
    PatientRecord,
    Resolution,
    ResolutionKind,
    SignalKind,
    WellnessPlanBenefit,
    WellnessPlanRecord,
)
from .test_structures import ScenarioResult, StepResult, TestStatus

__all__ = [
    "EntityKind",
    "ContactType",
    "ContactRecord",
    "PatientRecord",
    "AppointmentRecord",
    "WellnessPlanRecord",
    "WellnessPlanBenefit",
    "SignalKind",
    "OutcomeSignal",
    "ResolutionKind",
    "Resolution",
    "TestStatus",
    "StepResult",
    "ScenarioResult",
]
