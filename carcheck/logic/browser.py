"""
Browser automation capability.

The extractor only talks to the narrow BrowserSession interface below, so it
can run against a fake in tests. PlaywrightBrowserSession is the production
implementation: headless Chromium with a realistic user agent, a fixed
viewport and non-essential resource types aborted at the routing layer.
"""

import logging
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence

from playwright.async_api import async_playwright, Browser, Page, Playwright, Route

from carcheck.config import CarCheckConfig

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]


class BrowserSession(Protocol):
    async def navigate(self, url: str, timeout_ms: int) -> None: ...

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None: ...

    async def evaluate(self, script: str, arg: Any = None) -> Any: ...

    async def screenshot(self, path: str) -> None: ...

    async def close(self) -> None: ...


BrowserFactory = Callable[[], Awaitable[BrowserSession]]


class PlaywrightBrowserSession:
    """One Chromium instance with one page. Never shared between requests."""

    def __init__(self, playwright: Playwright, browser: Browser, page: Page):
        self._playwright = playwright
        self._browser = browser
        self.page = page

    @classmethod
    async def launch(
        cls,
        user_agent: Optional[str] = None,
        viewport: Optional[dict] = None,
        blocked_resource_types: Optional[Sequence[str]] = None,
        headless: bool = True,
    ) -> "PlaywrightBrowserSession":
        blocked = set(CarCheckConfig.BLOCKED_RESOURCE_TYPES if blocked_resource_types is None
                      else blocked_resource_types)

        async def _route_filter(route: Route):
            if route.request.resource_type in blocked:
                await route.abort()
            else:
                await route.continue_()

        playwright = await async_playwright().start()
        browser = None
        try:
            browser = await playwright.chromium.launch(headless=headless, args=LAUNCH_ARGS)
            context = await browser.new_context(
                user_agent=user_agent or CarCheckConfig.BROWSER_USER_AGENT,
                viewport=viewport or {
                    "width": CarCheckConfig.BROWSER_VIEWPORT_WIDTH,
                    "height": CarCheckConfig.BROWSER_VIEWPORT_HEIGHT,
                },
            )
            page = await context.new_page()
            if blocked:
                await page.route("**/*", _route_filter)
            page.on("console", lambda msg: logger.debug("Page log: %s", msg.text))
        except Exception:
            try:
                if browser is not None:
                    await browser.close()
            finally:
                await playwright.stop()
            raise

        logger.info("[Browser] Chromium launched (headless=%s)", headless)
        return cls(playwright, browser, page)

    async def navigate(self, url: str, timeout_ms: int) -> None:
        logger.info("[Browser] Loading: %s", url)
        await self.page.goto(url, wait_until="networkidle", timeout=timeout_ms)

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        await self.page.wait_for_selector(selector, timeout=timeout_ms)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self.page.evaluate(script, arg)

    async def screenshot(self, path: str) -> None:
        await self.page.screenshot(path=path)
        logger.info("[Browser] Debug screenshot saved to %s", path)

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()
        logger.info("[Browser] Closed")


async def launch_browser() -> BrowserSession:
    """Default BrowserFactory, configured from CarCheckConfig."""
    return await PlaywrightBrowserSession.launch()
