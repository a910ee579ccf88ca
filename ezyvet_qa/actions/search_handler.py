import logging
import re
from typing import TYPE_CHECKING, Optional

from playwright.async_api import Locator

from ezyvet_qa.actions.wait import TextMatcher, read_attribute, read_text, text_matches, wait_until, wait_visible
from ezyvet_qa.exceptions import NotFoundTimeout, UnresolvedFieldError

if TYPE_CHECKING:
    from ezyvet_qa.actions.context import UIContext

LEFT_PANE = "#leftpane"
SEARCH_INPUT = 'input[placeholder*="search" i]'
RESULT_LIST = "#filterlist"
RESULT_ITEMS = "#filterlist li"


class SearchHandler:
    """Left pane search and autocomplete primitives."""

    def __init__(self, ctx: "UIContext"):
        self.ctx = ctx

    @property
    def page(self):
        return self.ctx.page

    def search_input(self) -> Locator:
        return self.page.locator(LEFT_PANE).locator(SEARCH_INPUT)

    def result_items(self) -> Locator:
        return self.page.locator(RESULT_ITEMS)

    async def sidebar_search(self, query: str):
        """Clear the left pane search field, type ``query`` and submit.

        Results populate asynchronously; checking them is the caller's job.
        """
        search_input = self.search_input()
        await search_input.clear()
        await search_input.fill(query)
        await search_input.press("Enter")
        logging.debug(f"Submitted sidebar search: {query}")

    async def wait_for_results_list(self, timeout: Optional[float] = None):
        timeout = self.ctx.timeouts.list_ready if timeout is None else timeout
        await wait_visible(self.result_items().first, timeout, "the search result list to render")

    async def await_search_result(self, pattern: TextMatcher, timeout: Optional[float] = None) -> str:
        """Wait until the first result item matches ``pattern``.

        Args:
            pattern: Exact text, or a compiled regex searched in the item text.
            timeout: Seconds to wait, defaults to the search_result bound.

        Returns:
            str: text of the matching item.

        Raises:
            NotFoundTimeout: nothing matched within the window.
        """
        timeout = self.ctx.timeouts.search_result if timeout is None else timeout
        first = self.result_items().first

        async def _first_matches():
            text = await read_text(first)
            return text if text_matches(text, pattern) else None

        expected = pattern if isinstance(pattern, str) else pattern.pattern
        return await wait_until(
            _first_matches,
            timeout,
            interval=self.ctx.timeouts.poll_interval,
            description=f"a search result matching {expected!r}",
            error_cls=NotFoundTimeout,
        )

    async def select_search_result(self, text: str):
        await self.page.locator(RESULT_LIST).get_by_text(re.compile(re.escape(text))).first.click()

    async def resolve_autocomplete(
        self, field: Locator, text: str, expected: Optional[TextMatcher] = None, timeout: Optional[float] = None
    ) -> str:
        """Type into an autocomplete field key by key and wait for it to resolve.

        The field's autocomplete listens to keystrokes, not value changes, and
        sets its ``title`` once exactly one option matches.

        Raises:
            UnresolvedFieldError: no match, or several matches.
        """
        timeout = self.ctx.timeouts.autocomplete if timeout is None else timeout
        expected = text if expected is None else expected
        await field.press_sequentially(text, delay=self.ctx.timeouts.type_delay_ms)

        async def _resolved():
            title = await read_attribute(field, "title")
            return title if text_matches(title, expected) else None

        return await wait_until(
            _resolved,
            timeout,
            interval=self.ctx.timeouts.poll_interval,
            description=f"autocomplete to resolve {text!r}",
            error_cls=UnresolvedFieldError,
        )
