import logging

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.actions.wait import wait_visible

TAB_SLIDER = ".tabSliderHolder"

# Text that appears in the tab slider once a main tab has rendered
TAB_READY_MARKERS = {
    "Dashboard": "Dashboard",
    "Contacts": "New Contact",
    "Patients": "New Patient",
    "Financial": "New Invoice",
    "Admin": "New Product",
}


def tab_role_name(tab: str) -> str:
    return "primary-tab-icon-" + ("animals" if tab == "Patients" else tab.lower())


async def navigate_to_tab(ui: UIContext, tab: str):
    """Open a main tab and wait until its toolbar has rendered.

    Args:
        ui: Page context.
        tab: One of Dashboard, Contacts, Patients, Financial, Admin.
    """
    if tab not in TAB_READY_MARKERS:
        raise ValueError(f"Unknown tab: {tab}")
    await ui.page.get_by_role("tab", name=tab_role_name(tab)).click()
    marker = ui.page.locator(TAB_SLIDER).get_by_text(TAB_READY_MARKERS[tab]).first
    await wait_visible(marker, ui.timeouts.tab_ready, f"the {tab} tab to load")
    logging.debug(f"Navigated to {tab} tab")


async def navigate_to_wellness_plans(ui: UIContext):
    await navigate_to_tab(ui, "Admin")
    link = ui.page.get_by_text("Wellness Plans", exact=True)
    await wait_visible(link, ui.timeouts.tab_ready, "the Wellness Plans admin link")
    await link.click()
    await ui.search.wait_for_results_list()
