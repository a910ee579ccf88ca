import logging
from typing import Optional
from urllib.parse import urlparse

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ezyvet_qa.actions.wait import wait_until, wait_visible
from ezyvet_qa.config import DEFAULT_LOCATION, Timeouts

AVATAR = "text=/^[A-Z]{2}$/"


def is_root_url(url: str) -> bool:
    return urlparse(url).path in ("", "/")


class LoginPage:
    """Login form, including the optional location picker shown after it."""

    def __init__(self, page: Page, timeouts: Timeouts = None):
        self.page = page
        self.timeouts = timeouts or Timeouts()
        # the main and portal login pages use different ids
        self.email_input = page.locator("#input-email, #login-email").first
        self.password_input = page.locator("#input-password, #login-password").first
        self.login_button = page.get_by_text("Login", exact=True).first
        self.location_heading = page.get_by_text("Please select a location")
        self.avatar = page.locator(AVATAR).first

    async def goto(self):
        """Open the application root; logged-out users are redirected to /login.php."""
        await self.page.goto("/")

    async def login(self, email: str, password: str, location: Optional[str] = None):
        await self.email_input.fill(email)
        await self.password_input.fill(password)
        await self.login_button.click()
        await self.select_location(location)
        await self.page.wait_for_url(
            lambda url: "/login.php" not in str(url), timeout=self.timeouts.login_redirect * 1000
        )

    async def select_location(self, location: Optional[str] = None) -> bool:
        """Pick a location if the picker appears.

        Returns:
            bool: False when no picker was shown, meaning login is already complete.
        """
        try:
            await self.location_heading.wait_for(state="visible", timeout=self.timeouts.location_prompt * 1000)
        except PlaywrightTimeoutError:
            logging.debug("No location selection screen; login already complete")
            return False

        location_name = location or DEFAULT_LOCATION
        option = self.page.get_by_text(location_name, exact=False).first
        await wait_visible(option, self.timeouts.tab_ready, f"location option {location_name!r}")
        await option.click()
        try:
            await self.page.wait_for_load_state("networkidle", timeout=5000)
        except PlaywrightTimeoutError:
            logging.debug("Network did not go idle after location selection")
        logging.info(f"Selected location: {location_name}")
        return True

    async def expect_on_login_page(self):
        await wait_visible(self.email_input, self.timeouts.tab_ready, "the email input")
        await wait_visible(self.password_input, self.timeouts.tab_ready, "the password input")
        await wait_visible(self.login_button, self.timeouts.tab_ready, "the Login button")

        async def _on_login_url():
            return "/login" in self.page.url

        await wait_until(_on_login_url, self.timeouts.tab_ready, self.timeouts.poll_interval, "the login URL")

    async def expect_login_success(self):
        """Successful login lands on the root path with the initials avatar shown."""

        async def _on_root():
            return is_root_url(self.page.url)

        await wait_until(_on_root, self.timeouts.login_redirect, self.timeouts.poll_interval, "redirect to /")
        await wait_visible(self.avatar, self.timeouts.tab_ready, "the user avatar")

    async def expect_location_selection_visible(self):
        await wait_visible(self.location_heading, self.timeouts.location_prompt, "the location picker")

    def is_logged_in(self) -> bool:
        return "/login.php" not in self.page.url
