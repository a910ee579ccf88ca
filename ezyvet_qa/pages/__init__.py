from .dashboard_page import DashboardPage
from .login_page import LoginPage
from .navigation import navigate_to_tab, navigate_to_wellness_plans

__all__ = ["LoginPage", "DashboardPage", "navigate_to_tab", "navigate_to_wellness_plans"]
