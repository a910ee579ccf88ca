DEFAULT_CONFIG = {
    "browser_type": "chromium",
    "base_url": "https://master.usw2.trial.ezyvet.com",
    "viewport": {"width": 1280, "height": 720},
    "headless": True,
    "language": "en-US",
    "action_timeout": 30000,
    "navigation_timeout": 60000,
}
