import asyncio
import logging

from playwright.async_api import async_playwright


class Driver:
    # Serialises browser start-up when several scenarios launch at once
    __lock = asyncio.Lock()

    @staticmethod
    async def getInstance(browser_config, *args, **kwargs):
        """Create a new, fully isolated browser driver.

        Args:
            browser_config (dict): Browser configuration options.
        """
        logging.debug(f"Driver.getInstance called with browser_config: {browser_config}")

        async with Driver.__lock:
            driver = Driver(browser_config=browser_config)
            await driver.create_browser(browser_config=browser_config)
            return driver

    def __init__(self, browser_config=None, *args, **kwargs):
        self._is_closed = False
        self.page = None
        self.browser = None
        self.context = None
        self.playwright = None
        self.config = browser_config

    def is_closed(self):
        """Check if the browser instance is closed."""
        return getattr(self, "_is_closed", True)

    async def create_browser(self, browser_config):
        """Creates a new browser instance and sets up the page.

        Args:
            browser_config (dict): Browser configuration containing:
                - base_url (str): Root URL of the application under test
                - headless (bool): Whether to run browser in headless mode
                - viewport (dict): Browser viewport width and height
                - language (str): Browser locale
                - action_timeout (int): Default action timeout in milliseconds
                - navigation_timeout (int): Default navigation timeout in milliseconds
        """
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=browser_config["headless"],
                args=[
                    "--disable-dev-shm-usage",  # Mitigate shared memory issues in Docker
                    "--no-sandbox",
                    "--disable-setuid-sandbox",
                    "--disable-gpu",
                    f'--window-size={browser_config["viewport"]["width"]},{browser_config["viewport"]["height"]}',
                ],
            )

            # every driver gets its own context: separate cookies and storage
            self.context = await self.browser.new_context(
                base_url=browser_config["base_url"],
                viewport={"width": browser_config["viewport"]["width"], "height": browser_config["viewport"]["height"]},
                locale=browser_config["language"],
            )
            self.context.set_default_timeout(browser_config["action_timeout"])
            self.context.set_default_navigation_timeout(browser_config["navigation_timeout"])
            self.page = await self.context.new_page()
            self.config = browser_config

            logging.debug(f"Browser instance created successfully with config: {browser_config}")
            return self.page

        except Exception as e:
            logging.error("Failed to create browser instance.", exc_info=True)
            raise e

    def get_context(self):
        return self.context

    def get_page(self):
        """Returns the current page instance."""
        return self.page

    async def close_browser(self):
        """Closes the browser instance and stops Playwright."""
        try:
            if not self.is_closed():
                await self.browser.close()
                await self.playwright.stop()
                self._is_closed = True
                logging.debug("Browser instance closed successfully.")
        except Exception as e:
            logging.error("Failed to close browser instance.", exc_info=True)
            raise e
