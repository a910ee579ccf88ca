import re
from typing import Iterable

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.actions.wait import wait_visible
from ezyvet_qa.data.records import ContactRecord, ContactType, EntityKind, Resolution
from ezyvet_qa.pages.navigation import navigate_to_tab
from ezyvet_qa.resolvers.base import EntityResolver, EntityStrategy

EMAIL_FIELD = '[id="EmailPhone[1][emailphonedata_content]"]'


def contact_search_pattern(record: ContactRecord) -> re.Pattern:
    """Result items read "-  Last, First"; anchor both ends so "Smith, John" skips "Smithson, Johnny"."""
    return re.compile(rf"-\s+{re.escape(record.last_name)}, {re.escape(record.first_name)}(?!\w)")


async def set_contact_types(ui: UIContext, types: Iterable[ContactType]):
    """Tick exactly the requested classifications.

    The form pre-checks Customer, so it is cleared before anything else is ticked.
    """
    types = list(types)
    if ContactType.CUSTOMER not in types:
        await ui.page.get_by_role("checkbox", name=ContactType.CUSTOMER.value).uncheck()
    for contact_type in types:
        await ui.page.get_by_role("checkbox", name=contact_type.value).check()


def contact_strategy(record: ContactRecord, form_context_index: int = 0) -> EntityStrategy:
    page_pattern = re.compile(rf"{re.escape(record.last_name)}, {re.escape(record.first_name)}(?!\w)")

    async def navigate(ui: UIContext):
        await navigate_to_tab(ui, "Contacts")
        await ui.search.wait_for_results_list()

    async def fill_form(ui: UIContext):
        await set_contact_types(ui, record.contact_types)
        await ui.page.get_by_role("textbox", name="First Name").fill(record.first_name)
        await ui.page.get_by_role("textbox", name="Last Name").fill(record.last_name)
        await ui.page.locator(EMAIL_FIELD).fill(record.email)
        await ui.search.resolve_autocomplete(
            ui.page.locator(".inputSectionContent").get_by_test_id("EmailPhoneType"), "Email"
        )

    async def open_record(ui: UIContext):
        await ui.search.select_search_result(record.natural_key)

    async def verify(ui: UIContext):
        await wait_visible(
            ui.page.locator(".sidebar").get_by_text(page_pattern).first,
            ui.timeouts.verify,
            f"contact {record.natural_key!r} in the sidebar",
        )

    return EntityStrategy(
        kind=EntityKind.CONTACT,
        natural_key=record.natural_key,
        fill_form=fill_form,
        form_context_index=form_context_index,
        navigate=navigate,
        search_query=record.search_query,
        search_pattern=contact_search_pattern(record),
        on_resolved=open_record,
        verify=verify,
        required={"first_name": record.first_name, "last_name": record.last_name},
    )


async def create_contact(ui: UIContext, record: ContactRecord) -> Resolution:
    """Find the contact by "Last, First" or create it.

    Either way the contact's record is left open, so "New Patient" can follow.
    """
    return await EntityResolver(ui).resolve_or_create(contact_strategy(record))


async def create_customer(ui: UIContext, first_name: str, last_name: str) -> Resolution:
    return await create_contact(ui, ContactRecord(first_name=first_name, last_name=last_name))

