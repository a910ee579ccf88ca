"""Condition polling over the live document.

The application gives no reliable "loading complete" signal, so every wait
here polls a predicate against DOM state until it holds or the bound expires.
"""

import asyncio
import re
from typing import Awaitable, Callable, Optional, Pattern, Type, TypeVar, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ezyvet_qa.exceptions import ProbeTimeout

T = TypeVar("T")

# Reads happen only after count() saw the element, so they should be instant.
READ_TIMEOUT_MS = 1000

TextMatcher = Union[str, Pattern[str]]


async def wait_until(
    predicate: Callable[[], Awaitable[T]],
    timeout: float,
    interval: float = 0.1,
    description: str = "condition",
    error_cls: Type[ProbeTimeout] = ProbeTimeout,
) -> T:
    """Poll ``predicate`` until it returns a truthy value.

    Args:
        predicate: Coroutine function evaluated once per interval.
        timeout: Upper bound in seconds.
        interval: Pause between evaluations in seconds.
        description: What is being waited for, used in the error message.
        error_cls: ProbeTimeout subclass raised when the bound expires.

    Returns:
        The first truthy value returned by the predicate.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while True:
        result = await predicate()
        if result:
            return result
        remaining = deadline - loop.time()
        if remaining <= 0:
            raise error_cls(description, timeout)
        await asyncio.sleep(min(interval, remaining))


async def wait_visible(
    locator: Locator,
    timeout: float,
    description: str,
    error_cls: Type[ProbeTimeout] = ProbeTimeout,
) -> Locator:
    try:
        await locator.wait_for(state="visible", timeout=timeout * 1000)
    except PlaywrightTimeoutError as e:
        raise error_cls(description, timeout) from e
    return locator


async def wait_hidden(
    locator: Locator,
    timeout: float,
    description: str,
    error_cls: Type[ProbeTimeout] = ProbeTimeout,
) -> Locator:
    try:
        await locator.wait_for(state="hidden", timeout=timeout * 1000)
    except PlaywrightTimeoutError as e:
        raise error_cls(description, timeout) from e
    return locator


async def read_text(locator: Locator) -> Optional[str]:
    """Text content of the locator, or None when it is not attached."""
    if await locator.count() == 0:
        return None
    try:
        return await locator.text_content(timeout=READ_TIMEOUT_MS)
    except PlaywrightError:
        return None


async def read_attribute(locator: Locator, name: str) -> Optional[str]:
    if await locator.count() == 0:
        return None
    try:
        return await locator.get_attribute(name, timeout=READ_TIMEOUT_MS)
    except PlaywrightError:
        return None


def normalize_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def text_matches(value: Optional[str], expected: TextMatcher) -> bool:
    """A plain string must equal the value (whitespace-normalised); a pattern is searched."""
    if value is None:
        return False
    if isinstance(expected, str):
        return normalize_whitespace(value) == normalize_whitespace(expected)
    return expected.search(value) is not None
