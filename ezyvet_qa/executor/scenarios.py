"""Built-in scenarios against the application.

Each build gets its own timestamp so concurrent runs never share fixtures.
"""

import time
from typing import Callable, Dict, Iterable, List, Optional

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.auth import login_with_retry, logout
from ezyvet_qa.config import Credentials, Settings
from ezyvet_qa.data.records import AppointmentRecord, ContactRecord, PatientRecord, WellnessPlanBenefit, WellnessPlanRecord
from ezyvet_qa.executor.scenario import Scenario
from ezyvet_qa.resolvers.appointment import create_appointment, open_new_appointment
from ezyvet_qa.resolvers.contact import create_contact
from ezyvet_qa.resolvers.patient import create_patient_from_contact, open_new_patient_from_contact
from ezyvet_qa.resolvers.wellness_plan import create_wellness_plan


def timestamp() -> int:
    return int(time.time() * 1000)


def _login_step(credentials: Credentials):
    async def _login(ui: UIContext, state):
        await login_with_retry(ui.page, credentials, timeouts=ui.timeouts, events=ui.events)

    return _login


def auth_login_logout(credentials: Credentials, stamp: Optional[int] = None) -> Scenario:
    async def _logout(ui: UIContext, state):
        await logout(ui.page, ui.timeouts)

    return Scenario("auth_login_logout").step("login", _login_step(credentials)).step("logout", _logout)


def _owner_and_patient(stamp: int):
    owner = ContactRecord(first_name="Test", last_name=f"Owner{stamp}")
    patient = PatientRecord(name=f"TestPet{stamp}", owner_natural_key=owner.natural_key)
    return owner, patient


def patient_creation(credentials: Credentials, stamp: Optional[int] = None) -> Scenario:
    owner, patient = _owner_and_patient(stamp or timestamp())

    async def _contact(ui: UIContext, state):
        return await create_contact(ui, owner)

    async def _patient(ui: UIContext, state):
        await open_new_patient_from_contact(ui)
        return await create_patient_from_contact(ui, patient)

    return (
        Scenario("patient_creation")
        .step("login", _login_step(credentials))
        .step("create_contact", _contact)
        .step("create_patient", _patient)
    )


def appointment_creation(
    credentials: Credentials, stamp: Optional[int] = None, resource_name: str = "Dr Smith"
) -> Scenario:
    scenario = patient_creation(credentials, stamp)
    scenario.name = "appointment_creation"
    appointment = AppointmentRecord(resource_name=resource_name)

    async def _appointment(ui: UIContext, state):
        await open_new_appointment(ui)
        return await create_appointment(ui, appointment)

    return scenario.step("create_appointment", _appointment)


def wellness_plan_creation(credentials: Credentials, stamp: Optional[int] = None) -> Scenario:
    stamp = stamp or timestamp()
    plan = WellnessPlanRecord(
        name=f"Test Wellness Plan {stamp}",
        benefits=[WellnessPlanBenefit(name=f"Test Benefit {stamp}")],
    )

    async def _plan(ui: UIContext, state):
        return await create_wellness_plan(ui, plan)

    return Scenario("wellness_plan_creation").step("login", _login_step(credentials)).step("create_wellness_plan", _plan)


SCENARIOS: Dict[str, Callable[..., Scenario]] = {
    "auth_login_logout": auth_login_logout,
    "patient_creation": patient_creation,
    "appointment_creation": appointment_creation,
    "wellness_plan_creation": wellness_plan_creation,
}


def build_scenario(name: str, credentials: Credentials, **kwargs) -> Scenario:
    try:
        builder = SCENARIOS[name]
    except KeyError:
        raise ValueError(f"Unknown scenario: {name}. Available: {', '.join(sorted(SCENARIOS))}")
    return builder(credentials, **kwargs)


def validate_scenario_names(names: Iterable[str]) -> List[str]:
    """Return the names unchanged, or raise ValueError listing the unknown ones."""
    names = list(names)
    unknown = [name for name in names if name not in SCENARIOS]
    if unknown:
        raise ValueError(f"Unknown scenario(s): {', '.join(unknown)}. Available: {', '.join(sorted(SCENARIOS))}")
    return names


def build_configured_scenario(name: str, settings: Settings) -> Scenario:
    """Build a scenario with the fixture values taken from the settings."""
    kwargs = {}
    if name == "appointment_creation":
        kwargs["resource_name"] = settings.appointment_resource
    return build_scenario(name, settings.credentials, **kwargs)
