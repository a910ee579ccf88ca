import re

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.actions.wait import wait_visible
from ezyvet_qa.data.records import AppointmentRecord, EntityKind, Resolution
from ezyvet_qa.resolvers.base import EntityResolver, EntityStrategy

DROPDOWN_ANCESTOR = 'xpath=ancestor::div[contains(@class, "newDropDown")]'
MAGNIFIER = ".icon-magnifying-glass"


async def open_new_appointment(ui: UIContext, form_context_index: int = 1):
    """Press "New Appointment" on the patient's tab and wait for the form."""
    await ui.page.get_by_test_id("NewAppointment").nth(form_context_index).click()
    await wait_visible(ui.page.get_by_text("Appointment Details").first, ui.timeouts.tab_ready, "the appointment form")


def appointment_strategy(record: AppointmentRecord, form_context_index: int = 2) -> EntityStrategy:
    """Appointments have no natural key to search for; every call creates one.

    With no fallback check, a save without a toast is a failure.
    """

    async def fill_form(ui: UIContext):
        resource = ui.page.get_by_test_id("Resource")
        trigger = resource.locator(DROPDOWN_ANCESTOR).locator(MAGNIFIER)
        await ui.dropdown.fill_lookup(
            resource, trigger, record.resource_name, re.compile(re.escape(record.resource_name), re.IGNORECASE)
        )

    return EntityStrategy(
        kind=EntityKind.APPOINTMENT,
        natural_key=record.natural_key,
        fill_form=fill_form,
        form_context_index=form_context_index,
        required={"resource_name": record.resource_name},
        broad_toasts=True,
    )


async def create_appointment(ui: UIContext, record: AppointmentRecord, form_context_index: int = 2) -> Resolution:
    return await EntityResolver(ui).resolve_or_create(appointment_strategy(record, form_context_index))
