"""
Listing extractor - turns a Yad2 listing page into VehicleAttributes.

Flow:
1. Open a browser session and load the page (wait for network quiescence)
2. Fail fast on the anti-automation challenge page
3. Wait for the listing container
4. Read the rendered HTML and walk each field's selector chain
5. Validate required fields

The session is closed on every exit path. Failures are always one of
challenge-detected, missing-required-fields or generic extraction failure.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from bs4 import BeautifulSoup

from carcheck.config import CarCheckConfig, ValidationLevel
from carcheck.domains.cars.config import domain_config
from carcheck.domains.cars.schemas import VehicleAttributes
from carcheck.logic.browser import BrowserFactory, BrowserSession, launch_browser
from carcheck.logic.errors import ErrorKind, ExtractionError
from carcheck.logic.guardrails import Guardrails
from carcheck.logic.preprocessor import build_attributes, normalize_text, parse_int

logger = logging.getLogger(__name__)

BODY_TEXT_SCRIPT = "() => document.body ? document.body.textContent : ''"
PAGE_HTML_SCRIPT = "() => document.documentElement.outerHTML"


@dataclass
class ExtractorSettings:
    page_load_timeout_ms: int = CarCheckConfig.PAGE_LOAD_TIMEOUT_MS
    content_timeout_ms: int = CarCheckConfig.CONTENT_TIMEOUT_MS
    container: str = domain_config["extraction"]["container"]
    challenge_phrases: List[str] = field(default_factory=lambda: list(domain_config["extraction"]["challenge_phrases"]))
    screenshot_path: str = CarCheckConfig.DEBUG_SCREENSHOT_PATH
    validation_level: ValidationLevel = CarCheckConfig.VALIDATION_LEVEL


def first_match(soup: BeautifulSoup, selectors: Sequence[str],
                accept: Callable[[str], Optional[object]]):
    """
    Try each selector in order and return the first accepted value.

    `accept` maps the element text to a value, or None to reject it.
    Returns (value, selector) or (None, None).
    """
    for selector in selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        value = accept(normalize_text(element.get_text()))
        if value is not None:
            return value, selector
    return None, None


def _accept_text(text: str) -> Optional[str]:
    return text or None


def _accept_positive(text: str) -> Optional[int]:
    value = parse_int(text)
    return value if value else None


def _accept_count(text: str) -> Optional[int]:
    return parse_int(text)


ACCEPTORS = {
    "title": _accept_text,
    "gearbox": _accept_text,
    "engine_type": _accept_text,
    "price": _accept_positive,
    "year": _accept_positive,
    "mileage": _accept_positive,
    "ownership": _accept_count,
}


def extract_fields(html: str, selectors: Optional[Dict[str, List[str]]] = None) -> Dict[str, object]:
    """Apply every selector chain to a rendered page. Unmatched fields are absent."""
    soup = BeautifulSoup(html, "html.parser")
    chains = selectors or domain_config["extraction"]["selectors"]
    fields = {}
    for name, candidates in chains.items():
        value, selector = first_match(soup, candidates, ACCEPTORS.get(name, _accept_text))
        if value is not None:
            logger.debug("Found %s using selector: %s", name, selector)
            fields[name] = value
    return fields


class ListingExtractor:
    """Scrapes one listing per call; no retries, no shared browser."""

    def __init__(
        self,
        browser_factory: BrowserFactory = launch_browser,
        selectors: Optional[Dict[str, List[str]]] = None,
        settings: Optional[ExtractorSettings] = None,
    ):
        self.browser_factory = browser_factory
        self.selectors = selectors or domain_config["extraction"]["selectors"]
        self.settings = settings or ExtractorSettings()

    async def extract(self, url: str) -> VehicleAttributes:
        session: Optional[BrowserSession] = None
        try:
            logger.info("Starting Yad2 scraping for URL: %s", url)
            session = await self.browser_factory()
            return await self._scrape(session, url)
        except ExtractionError:
            raise
        except Exception as e:
            logger.exception("Error scraping listing %s", url)
            raise ExtractionError(
                ErrorKind.EXTRACTION_FAILED, detail=f"{type(e).__name__}: {e}", context={"url": url}
            ) from e
        finally:
            if session is not None:
                await self._close(session)

    async def _scrape(self, session: BrowserSession, url: str) -> VehicleAttributes:
        await session.navigate(url, self.settings.page_load_timeout_ms)
        await self._check_challenge(session, url)

        try:
            await session.wait_for_selector(self.settings.container, self.settings.content_timeout_ms)
        except Exception:
            # a challenge can render after network idle; report it rather than a timeout
            await self._check_challenge(session, url)
            raise

        if self.settings.screenshot_path:
            await session.screenshot(self.settings.screenshot_path)

        html = await session.evaluate(PAGE_HTML_SCRIPT)
        fields = extract_fields(html or "", self.selectors)
        attrs = build_attributes(fields)
        logger.info("Extracted car data: %s", attrs.to_wire())

        guard = Guardrails(self.settings.validation_level)
        is_valid, report = guard.validate_all(attrs)
        if report["warnings"]:
            logger.warning("Listing %s passed with warnings: %s", url, report["warnings"])
        if not is_valid:
            kind = ErrorKind.MISSING_FIELDS if report["missing"] else ErrorKind.EXTRACTION_FAILED
            logger.warning("Validation failed for %s - missing=%s errors=%s",
                           url, report["missing"], report["errors"])
            raise ExtractionError(
                kind,
                detail=f"missing={report['missing']} errors={report['errors']}",
                context={"url": url, "car_data": attrs.to_wire()},
            )
        return attrs

    async def _check_challenge(self, session: BrowserSession, url: str):
        body_text = await session.evaluate(BODY_TEXT_SCRIPT) or ""
        for phrase in self.settings.challenge_phrases:
            if phrase in body_text:
                logger.warning("CAPTCHA detected on %s", url)
                raise ExtractionError(ErrorKind.CHALLENGE_DETECTED, detail="challenge page", context={"url": url})

    async def _close(self, session: BrowserSession):
        try:
            await session.close()
        except Exception as e:
            logger.warning("Failed to close browser session: %s", e)
