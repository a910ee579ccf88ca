from .driver import Driver
from .session import BrowserSession, BrowserSessionManager

__all__ = ["Driver", "BrowserSession", "BrowserSessionManager"]
