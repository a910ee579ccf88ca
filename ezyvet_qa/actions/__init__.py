from .context import UIContext
from .dropdown_handler import DropdownHandler
from .search_handler import SearchHandler
from .toast_handler import ToastHandler

__all__ = ["UIContext", "SearchHandler", "DropdownHandler", "ToastHandler"]
