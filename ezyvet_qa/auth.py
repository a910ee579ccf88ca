"""Login and logout flows for the application."""

import asyncio
import logging
from typing import Optional

from playwright.async_api import Page

from ezyvet_qa.config import Credentials, Settings, Timeouts, load_settings
from ezyvet_qa.exceptions import LoginFailure
from ezyvet_qa.pages.dashboard_page import DashboardPage
from ezyvet_qa.pages.login_page import LoginPage
from ezyvet_qa.utils import events as ev
from ezyvet_qa.utils.events import EventSink, LoggingEventSink


async def login(page: Page, credentials: Credentials, timeouts: Timeouts = None):
    """Log in with email, password and location, and check we landed on the dashboard."""
    login_page = LoginPage(page, timeouts)
    await login_page.goto()
    await login_page.login(credentials.email, credentials.password, credentials.location)
    await login_page.expect_login_success()


async def login_with_retry(
    page: Page,
    credentials: Credentials,
    max_attempts: int = 2,
    timeouts: Timeouts = None,
    events: EventSink = None,
):
    """Re-run the whole login sequence on any error, with a fixed pause between attempts.

    No state is cleaned up between attempts; navigating to the root again resets it.

    Raises:
        LoginFailure: every attempt failed.
    """
    timeouts = timeouts or Timeouts()
    events = events or LoggingEventSink()
    last_error: Optional[Exception] = None

    for attempt in range(1, max_attempts + 1):
        events.emit(ev.LOGIN_ATTEMPT, attempt=attempt, max_attempts=max_attempts, email=credentials.email)
        try:
            await login(page, credentials, timeouts)
            events.emit(ev.LOGIN_SUCCEEDED, attempt=attempt, email=credentials.email)
            return
        except Exception as e:
            last_error = e
            events.emit(ev.LOGIN_FAILED, logging.WARNING, attempt=attempt, error=str(e))
            if attempt < max_attempts:
                await asyncio.sleep(timeouts.login_retry_delay)

    raise LoginFailure(max_attempts, last_error)


async def login_with_settings(page: Page, settings: Settings = None, events: EventSink = None):
    """Log in with credentials from the environment (.env) or the given settings."""
    settings = settings or load_settings()
    if settings.credentials is None:
        raise ValueError("TEST_USER_EMAIL and TEST_USER_PASSWORD must be set in .env file")
    await login_with_retry(page, settings.credentials, timeouts=settings.timeouts, events=events)


async def logout(page: Page, timeouts: Timeouts = None):
    dashboard = DashboardPage(page, timeouts)
    await dashboard.logout()
    await dashboard.expect_logout_success()
    logging.info("Logged out")


async def save_auth_state(page: Page, state_path: str = "auth-state.json"):
    """Save cookies and storage so later sessions can skip the login form."""
    await page.context.storage_state(path=state_path)
