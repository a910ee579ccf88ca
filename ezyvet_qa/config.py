import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ezyvet_qa.browser.config import DEFAULT_CONFIG

DEFAULT_LOCATION = "Master branch (Database)"


class Timeouts(BaseModel):
    """Bounds for every wait issued against the application, in seconds."""

    search_result: float = 5.0
    list_ready: float = 10.0
    tab_ready: float = 5.0
    autocomplete: float = 5.0
    dropdown: float = 10.0
    toast_clear: float = 5.0
    error_toast: float = 3.0
    success_toast: float = 5.0
    verify: float = 5.0
    location_prompt: float = 10.0
    login_redirect: float = 30.0
    logout_redirect: float = 10.0
    poll_interval: float = 0.1
    # Only used where the UI exposes no condition to poll for.
    settle_margin: float = 1.5
    type_delay_ms: int = 50
    login_retry_delay: float = 2.0


class Credentials(BaseModel):
    email: str
    password: str
    location: str = DEFAULT_LOCATION


class Settings(BaseModel):
    base_url: str = DEFAULT_CONFIG["base_url"]
    credentials: Optional[Credentials] = None
    headless: bool = True
    viewport: Dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_CONFIG["viewport"]))
    language: str = DEFAULT_CONFIG["language"]
    action_timeout_ms: int = DEFAULT_CONFIG["action_timeout"]
    navigation_timeout_ms: int = DEFAULT_CONFIG["navigation_timeout"]
    timeouts: Timeouts = Field(default_factory=Timeouts)
    max_concurrent_scenarios: int = 4
    scenarios: List[str] = Field(default_factory=list)
    # Resource booked by the appointment_creation scenario
    appointment_resource: str = "Dr Smith"
    log_level: str = "info"

    def browser_config(self) -> Dict[str, Any]:
        return {
            **DEFAULT_CONFIG,
            "base_url": self.base_url,
            "headless": self.headless,
            "viewport": dict(self.viewport),
            "language": self.language,
            "action_timeout": self.action_timeout_ms,
            "navigation_timeout": self.navigation_timeout_ms,
        }


def _env_bool(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {value!r}")


def load_settings(cfg: Optional[Dict[str, Any]] = None, require_credentials: bool = True) -> Settings:
    """Build settings from a YAML dict, environment variables taking priority.

    Args:
        cfg: Parsed configuration file (may be None or empty).
        require_credentials: Raise when no login email/password is configured.

    Returns:
        Settings: validated settings.
    """
    load_dotenv()
    cfg = cfg or {}
    target = cfg.get("target", {})
    browser = cfg.get("browser_config", {})
    auth = cfg.get("credentials", {})

    email = os.getenv("TEST_USER_EMAIL") or auth.get("email", "")
    password = os.getenv("TEST_USER_PASSWORD") or auth.get("password", "")
    location = os.getenv("TEST_DEPARTMENT") or auth.get("location") or DEFAULT_LOCATION

    if require_credentials and (not email or not password):
        raise ValueError(
            "Login credentials not configured! Please set one of the following:\n"
            "   - Environment variables: TEST_USER_EMAIL and TEST_USER_PASSWORD\n"
            "   - Config file: credentials.email and credentials.password"
        )

    headless = _env_bool("HEADLESS")
    if headless is None:
        headless = browser.get("headless", True)
    # Docker images have no display server
    if os.getenv("DOCKER_ENV") == "true":
        headless = True

    settings = Settings(
        base_url=os.getenv("BASE_URL") or target.get("url") or DEFAULT_CONFIG["base_url"],
        credentials=Credentials(email=email, password=password, location=location) if email and password else None,
        headless=headless,
        viewport=browser.get("viewport", DEFAULT_CONFIG["viewport"]),
        language=browser.get("language", DEFAULT_CONFIG["language"]),
        action_timeout_ms=_env_int("ACTION_TIMEOUT") or browser.get("action_timeout", DEFAULT_CONFIG["action_timeout"]),
        navigation_timeout_ms=_env_int("NAVIGATION_TIMEOUT")
        or browser.get("navigation_timeout", DEFAULT_CONFIG["navigation_timeout"]),
        timeouts=Timeouts(**cfg.get("timeouts", {})),
        max_concurrent_scenarios=target.get("max_concurrent_scenarios", 4),
        scenarios=cfg.get("scenarios", []),
        appointment_resource=os.getenv("APPOINTMENT_RESOURCE")
        or cfg.get("fixtures", {}).get("appointment_resource", "Dr Smith"),
        log_level=cfg.get("log", {}).get("level", "info"),
    )
    return settings
