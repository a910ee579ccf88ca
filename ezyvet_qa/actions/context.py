import asyncio
import logging

from playwright.async_api import Page

from ezyvet_qa.actions.dropdown_handler import DropdownHandler
from ezyvet_qa.actions.search_handler import SearchHandler
from ezyvet_qa.actions.toast_handler import ToastHandler
from ezyvet_qa.config import Timeouts
from ezyvet_qa.utils.events import EventSink, LoggingEventSink


class UIContext:
    """Everything a resolver needs to drive one page: the page, its bounds and an event sink."""

    def __init__(self, page: Page, timeouts: Timeouts = None, events: EventSink = None):
        self.page = page
        self.timeouts = timeouts or Timeouts()
        self.events = events or LoggingEventSink()
        self.search = SearchHandler(self)
        self.dropdown = DropdownHandler(self)
        self.toast = ToastHandler(self)

    async def settle(self, reason: str = ""):
        """Fixed pause for surfaces that expose no condition to poll.

        Known workaround for the application's unsignalled render delay.
        """
        logging.debug(f"Settling {self.timeouts.settle_margin}s {reason}".rstrip())
        await asyncio.sleep(self.timeouts.settle_margin)
