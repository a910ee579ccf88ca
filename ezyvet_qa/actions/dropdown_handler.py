import logging
from typing import TYPE_CHECKING, Optional

from playwright.async_api import Locator

from ezyvet_qa.actions.wait import TextMatcher, wait_visible
from ezyvet_qa.exceptions import UnresolvedFieldError

if TYPE_CHECKING:
    from ezyvet_qa.actions.context import UIContext

LOOKUP_ITEMS = ".dropDownList.dropdown .dropDownListItem"
MAGNIFIER = ".icon-magnifying-glass"


class DropdownHandler:
    """Dropdown and lookup-field primitives."""

    def __init__(self, ctx: "UIContext"):
        self.ctx = ctx

    @property
    def page(self):
        return self.ctx.page

    def container(self, prefix: str) -> Locator:
        # the numeric id suffix changes on every page load
        return self.page.locator(f'[id^="{prefix}"]')

    async def open_filter_dropdown(self, container_prefix: str, trigger: str = ".icon"):
        await self.container(container_prefix).locator(trigger).first.click(force=True)
        await self.ctx.settle(f"after opening {container_prefix}")

    async def select_first_filtered_item(
        self, items: Locator, text_filter: TextMatcher, timeout: Optional[float] = None
    ) -> Locator:
        """Click the first visible item whose text matches ``text_filter``.

        The overlay can report itself unstable while already clickable, hence
        the forced click.
        """
        timeout = self.ctx.timeouts.dropdown if timeout is None else timeout
        target = items.filter(has_text=text_filter).first
        await wait_visible(target, timeout, f"a dropdown item matching {text_filter!r}", UnresolvedFieldError)
        await target.click(force=True)
        return target

    async def fill_lookup(
        self,
        field: Locator,
        trigger: Locator,
        search_text: str,
        item_filter: TextMatcher,
        list_scope: Optional[Locator] = None,
    ):
        """Fill a foreign-key lookup: open it, type, pick the first match.

        The typed text gets a trailing space; the filter list does not render
        without it.
        """
        await trigger.click(force=True)
        await self.ctx.settle("after opening lookup")
        await field.fill(f"{search_text} ")
        scope = list_scope if list_scope is not None else self.page
        await self.select_first_filtered_item(scope.locator(LOOKUP_ITEMS), item_filter)
        logging.debug(f"Lookup filled with first item matching {item_filter!r}")

    async def select_from_sidebar_list(self, container_prefix: str, query: str):
        """Open a dropdown whose options are filtered through the left pane search."""
        await self.open_filter_dropdown(container_prefix)
        await self.ctx.search.sidebar_search(query)
        await self.select_first_filtered_item(self.ctx.search.result_items(), query)
