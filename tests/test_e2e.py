"""End-to-end scenarios against a live instance.

These tests drive a real browser and require:
  - TEST_USER_EMAIL and TEST_USER_PASSWORD set in .env (or env vars)
  - Playwright browsers installed (``playwright install chromium``)

Run explicitly with::

    pytest --run-e2e -m e2e
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from dotenv import load_dotenv

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.auth import login_with_retry
from ezyvet_qa.browser import BrowserSession
from ezyvet_qa.config import load_settings
from ezyvet_qa.data import AppointmentRecord, ContactRecord, PatientRecord
from ezyvet_qa.executor.scenarios import appointment_creation, auth_login_logout, timestamp
from ezyvet_qa.resolvers import (
    create_appointment,
    create_contact,
    create_patient_from_contact,
    open_new_appointment,
    open_new_patient_from_contact,
)

load_dotenv()

pytestmark = [
    pytest.mark.e2e,
    pytest.mark.skipif(
        not os.environ.get("TEST_USER_EMAIL") or not os.environ.get("TEST_USER_PASSWORD"),
        reason="TEST_USER_EMAIL and TEST_USER_PASSWORD must be set",
    ),
]


@pytest.fixture
def settings(test_url):
    settings = load_settings()
    if test_url:
        settings.base_url = test_url
    return settings


@pytest_asyncio.fixture
async def ui(settings) -> AsyncGenerator[UIContext, None]:
    """A fresh browser session per test, closed afterwards."""
    async with BrowserSession(browser_config=settings.browser_config()) as session:
        yield UIContext(session.get_page(), settings.timeouts)


@pytest.mark.asyncio
async def test_login_logout(ui, settings):
    result = await auth_login_logout(settings.credentials).run(ui)
    result.raise_for_status()


@pytest.mark.asyncio
async def test_owner_patient_appointment(ui, settings):
    stamp = timestamp()
    await login_with_retry(ui.page, settings.credentials, timeouts=ui.timeouts, events=ui.events)

    owner = ContactRecord(first_name="Test", last_name=f"Owner{stamp}")
    contact = await create_contact(ui, owner)
    assert contact.created

    await open_new_patient_from_contact(ui)
    patient = await create_patient_from_contact(ui, PatientRecord(name=f"TestPet{stamp}"))
    assert patient.created

    await open_new_appointment(ui)
    appointment = await create_appointment(ui, AppointmentRecord(resource_name="Dr Smith"))
    assert appointment.created


@pytest.mark.asyncio
async def test_existing_owner_is_resolved(ui, settings):
    stamp = timestamp()
    await login_with_retry(ui.page, settings.credentials, timeouts=ui.timeouts, events=ui.events)

    owner = ContactRecord(first_name="Test", last_name=f"Owner{stamp}")
    assert (await create_contact(ui, owner)).created
    assert (await create_contact(ui, owner)).resolved


@pytest.mark.asyncio
async def test_appointment_scenario(ui, settings):
    result = await appointment_creation(settings.credentials).run(ui)
    result.raise_for_status()
