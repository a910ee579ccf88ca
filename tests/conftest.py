import os

import pytest
from fake_app import FakeApp, FakePage

from ezyvet_qa.actions.context import UIContext
from ezyvet_qa.config import Timeouts
from ezyvet_qa.utils.events import RecordingEventSink


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        '--url',
        action='store',
        default=None,
        help='Target URL for end-to-end tests (overrides BASE_URL)',
    )
    parser.addoption(
        '--run-e2e',
        action='store_true',
        default=False,
        help='Run tests that drive a real browser against a live instance',
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line('markers', 'e2e: drives a real browser against a live instance')


def pytest_collection_modifyitems(config: pytest.Config, items) -> None:
    if config.getoption('--run-e2e'):
        return
    skip_e2e = pytest.mark.skip(reason='needs --run-e2e')
    for item in items:
        if 'e2e' in item.keywords:
            item.add_marker(skip_e2e)


@pytest.fixture
def test_url(request: pytest.FixtureRequest) -> str:
    # Priority: CLI --url > env BASE_URL
    return request.config.getoption('--url') or os.getenv('BASE_URL', '')


@pytest.fixture
def fast_timeouts() -> Timeouts:
    return Timeouts(
        search_result=0.3,
        list_ready=1.0,
        tab_ready=1.0,
        autocomplete=1.0,
        dropdown=1.0,
        toast_clear=1.0,
        error_toast=0.6,
        success_toast=0.8,
        verify=0.5,
        location_prompt=0.3,
        login_redirect=1.0,
        logout_redirect=1.0,
        poll_interval=0.02,
        settle_margin=0,
        type_delay_ms=0,
        login_retry_delay=0,
    )


@pytest.fixture
def app() -> FakeApp:
    return FakeApp(logged_in=True)


@pytest.fixture
def page(app: FakeApp) -> FakePage:
    return FakePage(app)


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def ui(page: FakePage, fast_timeouts: Timeouts, events: RecordingEventSink) -> UIContext:
    return UIContext(page, fast_timeouts, events)
