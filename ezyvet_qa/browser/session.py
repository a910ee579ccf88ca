import asyncio
import logging
import uuid
from typing import Any, Dict, Optional

from playwright.async_api import BrowserContext, Page

from ezyvet_qa.browser.config import DEFAULT_CONFIG
from ezyvet_qa.browser.driver import Driver


class BrowserSession:
    """One isolated browser session; the unit of concurrency between scenarios."""

    def __init__(self, session_id: str = None, browser_config: Dict[str, Any] = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.browser_config = {**DEFAULT_CONFIG, **(browser_config or {})}
        self.driver: Optional[Driver] = None
        self._is_closed = False
        self._lock = asyncio.Lock()

    async def initialize(self):
        """Initialize browser session."""
        async with self._lock:
            if self._is_closed:
                raise RuntimeError("Browser session is closed")

            logging.debug(f"Initializing browser session {self.session_id} with config: {self.browser_config}")

            try:
                self.driver = await Driver.getInstance(browser_config=self.browser_config)
                logging.debug(f"Browser session {self.session_id} initialized successfully via Driver")
            except Exception as e:
                logging.error(f"Failed to initialize browser session {self.session_id}: {e}")
                await self._cleanup()
                raise

    async def navigate_to(self, path: str = "/", **kwargs):
        """Navigate to a path relative to the configured base URL."""
        kwargs.setdefault("wait_until", "domcontentloaded")
        logging.info(f"Session {self.session_id} navigating to: {path}")
        await self.get_page().goto(path, **kwargs)

    def get_page(self) -> Page:
        """Return current page via Driver."""
        if self._is_closed or not self.driver:
            raise RuntimeError("Browser session not initialized or closed")
        return self.driver.get_page()

    def get_context(self) -> BrowserContext:
        if self._is_closed or not self.driver:
            raise RuntimeError("Browser session not initialized or closed")
        return self.driver.get_context()

    async def save_storage_state(self, path: str = "auth-state.json"):
        """Persist cookies and local storage so a later session can reuse the login."""
        await self.get_context().storage_state(path=path)
        logging.info(f"Session {self.session_id} storage state saved to {path}")

    def is_closed(self) -> bool:
        return self._is_closed

    async def _cleanup(self):
        try:
            if self.driver and not self.driver.is_closed():
                await self.driver.close_browser()
        except Exception as e:
            logging.error(f"Error during cleanup: {e}")
        finally:
            self.driver = None

    async def close(self):
        """Close browser session."""
        async with self._lock:
            if self._is_closed:
                return

            logging.debug(f"Closing browser session {self.session_id}")
            self._is_closed = True
            await self._cleanup()

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class BrowserSessionManager:
    """Manager for multiple browser sessions."""

    def __init__(self):
        self.sessions: Dict[str, BrowserSession] = {}
        self._lock = asyncio.Lock()

    async def create_session(self, browser_config: Dict[str, Any] = None) -> BrowserSession:
        """Create and initialize a new browser session."""
        session = BrowserSession(browser_config=browser_config)
        await session.initialize()

        async with self._lock:
            self.sessions[session.session_id] = session

        logging.info(f"Created browser session: {session.session_id}")
        return session

    async def close_session(self, session_id: str):
        """Close and remove session."""
        async with self._lock:
            session = self.sessions.pop(session_id, None)
        if session:
            await session.close()
            logging.info(f"Closed session: {session_id}")

    async def close_all_sessions(self):
        """Close all sessions."""
        async with self._lock:
            sessions = list(self.sessions.values())
            self.sessions.clear()

        if sessions:
            await asyncio.gather(*[session.close() for session in sessions], return_exceptions=True)
            logging.info(f"Closed {len(sessions)} browser sessions")
