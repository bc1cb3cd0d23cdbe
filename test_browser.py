import asyncio

import pytest

from carcheck.logic import browser as browser_module
from carcheck.logic.browser import PlaywrightBrowserSession


class StubPage:
    def __init__(self, route_error=None):
        self.route_error = route_error
        self.routes = []
        self.handlers = {}

    async def route(self, pattern, handler):
        if self.route_error is not None:
            raise self.route_error
        self.routes.append(pattern)

    def on(self, event, handler):
        self.handlers[event] = handler


class StubContext:
    def __init__(self, page):
        self.page = page

    async def new_page(self):
        return self.page


class StubBrowser:
    def __init__(self, page):
        self.page = page
        self.context_kwargs = None
        self.closed = False

    async def new_context(self, **kwargs):
        self.context_kwargs = kwargs
        return StubContext(self.page)

    async def close(self):
        self.closed = True


class StubChromium:
    def __init__(self, browser):
        self.browser = browser

    async def launch(self, headless=True, args=None):
        return self.browser


class StubPlaywright:
    def __init__(self, browser):
        self.chromium = StubChromium(browser)
        self.stopped = False

    async def stop(self):
        self.stopped = True


@pytest.fixture
def playwright_stub(monkeypatch):
    def install(page):
        browser = StubBrowser(page)
        playwright = StubPlaywright(browser)

        class Manager:
            async def start(self):
                return playwright

        monkeypatch.setattr(browser_module, "async_playwright", lambda: Manager())
        return browser, playwright

    return install


def test_launch_registers_route_and_context(playwright_stub):
    page = StubPage()
    browser, playwright = playwright_stub(page)

    session = asyncio.run(PlaywrightBrowserSession.launch(
        user_agent="TestAgent/1.0", blocked_resource_types=["image"]))

    assert session.page is page
    assert page.routes == ["**/*"]
    assert "console" in page.handlers
    assert browser.context_kwargs["user_agent"] == "TestAgent/1.0"
    assert not browser.closed
    assert not playwright.stopped


def test_route_failure_stops_browser_and_driver(playwright_stub):
    page = StubPage(route_error=RuntimeError("route registration failed"))
    browser, playwright = playwright_stub(page)

    with pytest.raises(RuntimeError):
        asyncio.run(PlaywrightBrowserSession.launch(blocked_resource_types=["image"]))

    assert browser.closed
    assert playwright.stopped
