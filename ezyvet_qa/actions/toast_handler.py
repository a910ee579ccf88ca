import asyncio
import logging
import re
from typing import TYPE_CHECKING, List, Optional, Tuple

from playwright.async_api import Error as PlaywrightError

from ezyvet_qa.actions.wait import read_text, wait_until
from ezyvet_qa.data.records import OutcomeSignal
from ezyvet_qa.exceptions import ProbeTimeout

if TYPE_CHECKING:
    from ezyvet_qa.actions.context import UIContext

ERROR_TOAST = '.toast-error, [class*="toast"][class*="error"]'
SUCCESS_TOAST = '.toast-success, [class*="toast"][class*="success"]'
# Appointment and wellness plan screens also report through non-toast
# message holders; those pages keep empty holders around permanently.
BROAD_ERROR_TOAST = f'{ERROR_TOAST}, [class*="Error"]'
BROAD_SUCCESS_TOAST = f'{SUCCESS_TOAST}, [class*="Success"]'

NON_BLANK = re.compile(r"\S")


def toast_selectors(broad: bool = False) -> Tuple[str, str]:
    """The (error, success) selector pair."""
    if broad:
        return BROAD_ERROR_TOAST, BROAD_SUCCESS_TOAST
    return ERROR_TOAST, SUCCESS_TOAST


class ToastHandler:
    """Classify the outcome of a Save by racing the error and success toasts."""

    def __init__(self, ctx: "UIContext"):
        self.ctx = ctx

    async def visible_messages(self, selector: str) -> List[str]:
        """Text of every visible match with non-blank text, in document order."""
        matches = self.ctx.page.locator(selector).filter(has_text=NON_BLANK)
        messages = []
        for index in range(await matches.count()):
            toast = matches.nth(index)
            try:
                if not await toast.is_visible():
                    continue
            except PlaywrightError:
                # detached between count() and the check
                continue
            text = await read_text(toast)
            if text and text.strip():
                messages.append(text.strip())
        return messages

    async def _probe(self, selector: str, timeout: float) -> Optional[str]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            messages = await self.visible_messages(selector)
            if messages:
                return messages[0]
            remaining = deadline - loop.time()
            if remaining <= 0:
                return None
            await asyncio.sleep(min(self.ctx.timeouts.poll_interval, remaining))

    async def wait_for_clear(self, timeout: Optional[float] = None, broad: bool = False) -> bool:
        """Wait for toasts left by an earlier save to disappear.

        Returns:
            bool: False when a stale toast is still showing after the bound.
        """
        timeout = self.ctx.timeouts.toast_clear if timeout is None else timeout
        error_selector, success_selector = toast_selectors(broad)

        async def _cleared():
            return not await self.visible_messages(f"{error_selector}, {success_selector}")

        try:
            await wait_until(_cleared, timeout, self.ctx.timeouts.poll_interval, "stale toasts to clear")
        except ProbeTimeout:
            logging.warning("A toast from an earlier action is still visible; the next outcome may be misread")
            return False
        return True

    async def await_outcome(
        self, error_timeout: Optional[float] = None, success_timeout: Optional[float] = None, broad: bool = False
    ) -> OutcomeSignal:
        """Race both probes; an error toast wins even while the success wait is pending.

        Returns:
            OutcomeSignal: success or error with the toast text, or unknown
            when neither toast appeared inside its window.
        """
        timeouts = self.ctx.timeouts
        error_selector, success_selector = toast_selectors(broad)
        error_task = asyncio.create_task(
            self._probe(error_selector, timeouts.error_toast if error_timeout is None else error_timeout)
        )
        success_task = asyncio.create_task(
            self._probe(success_selector, timeouts.success_toast if success_timeout is None else success_timeout)
        )
        pending = {error_task, success_task}
        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                if error_task in done and error_task.result():
                    logging.debug(f"Error toast detected: {error_task.result()}")
                    return OutcomeSignal.error(error_task.result())
                if success_task in done and success_task.result():
                    logging.debug(f"Success toast detected: {success_task.result()}")
                    return OutcomeSignal.success(success_task.result())
            return OutcomeSignal.unknown()
        finally:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
