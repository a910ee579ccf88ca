import logging
import re

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.actions.wait import wait_hidden, wait_visible
from ezyvet_qa.data.records import EntityKind, Resolution, WellnessPlanBenefit, WellnessPlanRecord
from ezyvet_qa.pages.navigation import navigate_to_wellness_plans
from ezyvet_qa.resolvers.base import EntityResolver, EntityStrategy

NAME_FIELD = 'input[name="wellnessplandata_name"]'
NEW_PLAN_BUTTON = re.compile(r"new.*wellness|add.*wellness", re.IGNORECASE)
SUBSCRIPTION_DROPDOWN = "subscriptionproductDropdown"
CANCELLATION_DROPDOWN = "cancellationproductproductDropdown"
MAGNIFIER = ".icon-magnifying-glass"
ADD_BENEFITS = "AddWellnessPlanBenefits"
BENEFIT_NAME_FIELD = 'input[name="wellnessplanbenefitdata_name"]'
BENEFIT_PRODUCT_SELECT = '.ant-select[forclass="Product"]'
BENEFIT_PRODUCT_ITEMS = ".ant-select-dropdown .ant-select-item"


def wellness_plan_search_pattern(record: WellnessPlanRecord) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(record.name)}(?!\w)")


async def _fill_product(ui: UIContext, container_prefix: str, product: str, scoped_list: bool):
    container = ui.dropdown.container(container_prefix)
    field = container.get_by_test_id("Product")
    await wait_visible(field, ui.timeouts.tab_ready, f"the {container_prefix} product field")
    # the cancellation list must be scoped, the page-wide one still holds the subscription pick
    await ui.dropdown.fill_lookup(
        field,
        container.locator(MAGNIFIER),
        product,
        re.compile(re.escape(product), re.IGNORECASE),
        list_scope=container if scoped_list else None,
    )


async def add_wellness_plan_benefit(ui: UIContext, benefit: WellnessPlanBenefit):
    """Add one benefit through the overlay shown on a saved wellness plan."""
    await ui.page.get_by_test_id(ADD_BENEFITS).click()
    name_field = ui.page.locator(BENEFIT_NAME_FIELD)
    await wait_visible(name_field, ui.timeouts.tab_ready, "the benefit overlay")
    await name_field.fill(benefit.name)

    product_select = ui.page.locator(BENEFIT_PRODUCT_SELECT).first
    await wait_visible(product_select, ui.timeouts.tab_ready, "the benefit product select")
    await product_select.click()
    await ui.page.keyboard.type(benefit.product)
    await ui.dropdown.select_first_filtered_item(
        ui.page.locator(BENEFIT_PRODUCT_ITEMS), re.compile(re.escape(benefit.product), re.IGNORECASE)
    )

    await ui.page.get_by_test_id("Add").click()
    await wait_hidden(name_field, ui.timeouts.verify, "the benefit overlay to close")
    logging.info(f"Added wellness plan benefit: {benefit.name}")


def wellness_plan_strategy(record: WellnessPlanRecord, form_context_index: int = 0) -> EntityStrategy:
    async def fill_form(ui: UIContext):
        new_button = ui.page.get_by_text(NEW_PLAN_BUTTON).first
        await wait_visible(new_button, ui.timeouts.tab_ready, "the New Wellness Plan button")
        await new_button.click()

        name_field = ui.page.locator(NAME_FIELD)
        await wait_visible(name_field, ui.timeouts.tab_ready, "the wellness plan name field")
        await name_field.fill(record.name)
        await _fill_product(ui, SUBSCRIPTION_DROPDOWN, record.subscription_product, scoped_list=False)
        await _fill_product(ui, CANCELLATION_DROPDOWN, record.cancellation_product, scoped_list=True)

    async def verify(ui: UIContext):
        # the benefits button is only rendered on a saved plan
        await wait_visible(ui.page.get_by_test_id(ADD_BENEFITS), ui.timeouts.verify, "the saved wellness plan")

    async def add_benefits(ui: UIContext):
        for benefit in record.benefits:
            await add_wellness_plan_benefit(ui, benefit)

    return EntityStrategy(
        kind=EntityKind.WELLNESS_PLAN,
        natural_key=record.natural_key,
        fill_form=fill_form,
        form_context_index=form_context_index,
        navigate=navigate_to_wellness_plans,
        search_query=record.name,
        search_pattern=wellness_plan_search_pattern(record),
        verify=verify,
        after_create=add_benefits,
        required={"name": record.name},
        broad_toasts=True,
    )


async def create_wellness_plan(ui: UIContext, record: WellnessPlanRecord) -> Resolution:
    return await EntityResolver(ui).resolve_or_create(wellness_plan_strategy(record))
