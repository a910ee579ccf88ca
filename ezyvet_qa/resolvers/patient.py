import re

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.actions.wait import wait_until, wait_visible
from ezyvet_qa.data.records import EntityKind, PatientRecord, Resolution
from ezyvet_qa.pages.navigation import navigate_to_tab
from ezyvet_qa.resolvers.base import EntityResolver, EntityStrategy

NAME_FIELD = 'input[name="animaldata_name"]'
OWNER_DROPDOWN = "clientcontactDropdown"
AGE_FIELD = 'input[value="Not Set"]'
ESTIMATED_AGE = 'input[name="animaldata_estimated"]:visible'
TAGS_LIST = "xpath=following-sibling::*[2]//ul[1]"


def patient_search_pattern(record: PatientRecord) -> re.Pattern:
    # result items quote the patient name; quoting avoids partial-name hits
    return re.compile(rf'"{re.escape(record.name)}"')


async def fill_patient_details(ui: UIContext, record: PatientRecord):
    await ui.search.resolve_autocomplete(ui.page.get_by_test_id("AnimalColour"), record.colour)

    if record.age is not None:
        await ui.page.locator(AGE_FIELD).click()
        await ui.page.keyboard.type(str(record.age))
        estimated = ui.page.locator(ESTIMATED_AGE)

        async def _estimated_checked():
            return await estimated.count() > 0 and await estimated.first.is_checked()

        await wait_until(_estimated_checked, ui.timeouts.autocomplete, ui.timeouts.poll_interval, "estimated age flag")

    if record.tags:
        # tag input is the first list two siblings below the "General" label
        await ui.page.get_by_text("General", exact=True).locator(TAGS_LIST).click()
        for tag in record.tags:
            await ui.page.keyboard.type(tag)
            await ui.page.keyboard.press("Enter")


def _sidebar_verify(record: PatientRecord):
    async def verify(ui: UIContext):
        await wait_visible(
            ui.page.locator(".sidebar").get_by_text(re.compile(re.escape(record.name))).first,
            ui.timeouts.verify,
            f"patient {record.name!r} in the sidebar",
        )

    return verify


def patient_strategy(record: PatientRecord, form_context_index: int = 0) -> EntityStrategy:
    """Standalone creation from the Patients tab, looking the owner up by name."""

    async def navigate(ui: UIContext):
        await navigate_to_tab(ui, "Patients")
        await ui.search.wait_for_results_list()

    async def fill_form(ui: UIContext):
        await ui.page.locator(NAME_FIELD).fill(record.name)
        await ui.dropdown.select_from_sidebar_list(OWNER_DROPDOWN, record.owner_natural_key)
        await fill_patient_details(ui, record)

    return EntityStrategy(
        kind=EntityKind.PATIENT,
        natural_key=record.natural_key,
        fill_form=fill_form,
        form_context_index=form_context_index,
        navigate=navigate,
        search_query=record.name,
        search_pattern=patient_search_pattern(record),
        verify=_sidebar_verify(record),
        required={"name": record.name, "owner_natural_key": record.owner_natural_key},
    )


def contextual_patient_strategy(record: PatientRecord, form_context_index: int = 1) -> EntityStrategy:
    """Creation on a form opened with "New Patient" from a contact record.

    The host page fills in the owner. The contact's tab stays open, so this
    form's Save is not the first one on the page.
    """

    async def fill_form(ui: UIContext):
        await ui.page.locator(NAME_FIELD).fill(record.name)
        # owner is populated by the host page, nothing observable to wait on
        await ui.settle("for the owner field")
        await fill_patient_details(ui, record)

    return EntityStrategy(
        kind=EntityKind.PATIENT,
        natural_key=record.natural_key,
        fill_form=fill_form,
        form_context_index=form_context_index,
        verify=_sidebar_verify(record),
        required={"name": record.name},
    )


async def open_new_patient_from_contact(ui: UIContext):
    await ui.page.get_by_test_id("NewPatient").first.click()
    await wait_visible(ui.page.locator(NAME_FIELD).first, ui.timeouts.tab_ready, "the new patient form")


async def create_patient(ui: UIContext, record: PatientRecord) -> Resolution:
    return await EntityResolver(ui).resolve_or_create(patient_strategy(record))


async def create_patient_from_contact(ui: UIContext, record: PatientRecord, form_context_index: int = 1) -> Resolution:
    return await EntityResolver(ui).resolve_or_create(contextual_patient_strategy(record, form_context_index))
