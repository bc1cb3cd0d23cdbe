import pytest
from bs4 import BeautifulSoup

from carcheck.logic.extractor import BODY_TEXT_SCRIPT, PAGE_HTML_SCRIPT
from carcheck.logic.llm_client import LLMClientError


class FakeBrowserSession:
    """BrowserSession over a fixture HTML string; selectors are resolved with BeautifulSoup."""

    def __init__(self, html: str, fail_on: str = None):
        self.html = html
        self.soup = BeautifulSoup(html, "html.parser")
        self.fail_on = fail_on
        self.calls = []
        self.closed = False

    async def navigate(self, url, timeout_ms):
        self.calls.append(("navigate", url, timeout_ms))
        if self.fail_on == "navigate":
            raise TimeoutError(f"Timeout {timeout_ms}ms exceeded navigating to {url}")

    async def wait_for_selector(self, selector, timeout_ms):
        self.calls.append(("wait_for_selector", selector, timeout_ms))
        if self.soup.select_one(selector) is None:
            raise TimeoutError(f"Timeout {timeout_ms}ms exceeded waiting for {selector}")

    async def evaluate(self, script, arg=None):
        self.calls.append(("evaluate", script))
        if script == BODY_TEXT_SCRIPT:
            return self.soup.get_text()
        if script == PAGE_HTML_SCRIPT:
            return self.html
        raise AssertionError(f"unexpected script: {script}")

    async def screenshot(self, path):
        self.calls.append(("screenshot", path))

    async def close(self):
        self.closed = True
        if self.fail_on == "close":
            raise RuntimeError("browser already gone")


class FakeChatClient:
    """TextGenerator returning a canned reply (or raising) and recording calls."""

    def __init__(self, reply: str = None, error: Exception = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def chat(self, messages, temperature=None, json_mode=False):
        self.calls.append({"messages": messages, "temperature": temperature, "json_mode": json_mode})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def browser_factory():
    """Returns make(html, fail_on=None) -> (factory, session)."""
    def make(html, fail_on=None):
        session = FakeBrowserSession(html, fail_on=fail_on)

        async def factory():
            return session

        return factory, session

    return make


@pytest.fixture
def chat_client():
    def make(reply=None, error=None):
        return FakeChatClient(reply=reply, error=error)

    return make


@pytest.fixture
def llm_error():
    return LLMClientError("LLM error 429")
