import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

from playwright.async_api import Page

from ezyvet_qa.actions.wait import wait_until, wait_visible
from ezyvet_qa.config import Timeouts
from ezyvet_qa.pages.login_page import AVATAR, is_root_url


class DashboardPage:
    def __init__(self, page: Page, timeouts: Timeouts = None):
        self.page = page
        self.timeouts = timeouts or Timeouts()
        # shows the user's initials, e.g. "BA"
        self.user_avatar = page.locator(AVATAR).first
        self.logout_menu_item = page.get_by_text("Logout")

    async def goto(self):
        await self.page.goto("/")
        await self.expect_page_loaded()

    async def open_user_menu(self):
        await self.user_avatar.click()

    async def logout(self):
        """Avatar menu, Logout, then wait for the redirect to /login.php."""
        await self.open_user_menu()
        await self.logout_menu_item.click()
        await self.page.wait_for_url(re.compile(r"/login\.php"), timeout=self.timeouts.logout_redirect * 1000)

    async def get_user_initials(self) -> Optional[str]:
        return await self.user_avatar.text_content()

    async def expect_page_loaded(self):
        async def _on_root():
            return is_root_url(self.page.url)

        await wait_until(_on_root, self.timeouts.tab_ready, self.timeouts.poll_interval, "the dashboard URL")
        await wait_visible(self.user_avatar, self.timeouts.tab_ready, "the user avatar")

    async def expect_logout_success(self):
        async def _logged_out():
            parsed = urlparse(self.page.url)
            return parsed.path.endswith("/login.php") and parse_qs(parsed.query).get("sso") == ["0"]

        await wait_until(_logged_out, self.timeouts.logout_redirect, self.timeouts.poll_interval, "/login.php?sso=0")
