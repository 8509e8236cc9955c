# lesson_scout/crawler/fetcher.py
"""
Fetcher module: opens a page per attempt, filters its network requests,
navigates, runs an extraction callback and always closes the page.
"""
from __future__ import annotations

from typing import Awaitable, Callable, Dict, Optional, Protocol, TypeVar

from playwright.async_api import Browser, Page
from playwright.async_api import Error as PlaywrightError

from lesson_scout.config import ScraperConfig
from lesson_scout.crawler.resource_policy import route_handler
from lesson_scout.errors import ExhaustedRetriesError, TransientFetchError
from lesson_scout.logger import get_logger
from lesson_scout.models import FetchOutcome, PageTarget

T = TypeVar("T")

logger = get_logger(__name__)

Extract = Callable[[Page], Awaitable[T]]


class BrowserSource(Protocol):
    async def get_browser(self) -> Browser: ...


class PageFetcher:
    """Retry-governed page fetch: up to ``retries`` attempts, no backoff."""

    def __init__(
        self,
        browser: BrowserSource,
        *,
        retries: int = 3,
        headers: Optional[Dict[str, str]] = None,
        navigation_timeout: float = 30.0,
        selector_timeout: float = 10.0,
    ) -> None:
        if retries < 1:
            raise ValueError("retries must be >= 1")
        self.browser = browser
        self.retries = retries
        self.headers = dict(headers or {})
        self.navigation_timeout_ms = navigation_timeout * 1000
        self.selector_timeout_ms = selector_timeout * 1000

    @classmethod
    def from_config(cls, browser: BrowserSource, config: ScraperConfig) -> PageFetcher:
        return cls(
            browser,
            retries=config.retries,
            headers={"Accept-Language": config.accept_language, "User-Agent": config.user_agent},
            navigation_timeout=config.navigation_timeout,
            selector_timeout=config.selector_timeout,
        )

    async def fetch(self, url: str, extract: Extract[T]) -> FetchOutcome[T]:
        """Run *extract* against *url*; failures are retried from a fresh page."""
        remaining = self.retries
        attempt = 0
        last_error: Optional[TransientFetchError] = None
        while remaining > 0:
            remaining -= 1
            attempt += 1
            try:
                value = await self._attempt(url, extract)
            except Exception as exc:
                last_error = TransientFetchError(url, attempt, exc)
                logger.warning("cannot scrap %s (attempt %d/%d): %s", url, attempt, self.retries, exc)
                continue
            return FetchOutcome.success(url, value, attempt)

        cause = last_error.cause if last_error is not None else None
        error = ExhaustedRetriesError(url, attempt, cause)
        logger.error("%s", error)
        return FetchOutcome.failure(url, error)

    async def fetch_target(self, target: PageTarget, extract: Extract[T]) -> FetchOutcome[T]:
        """Like :meth:`fetch`, but waits for ``target.ready_selector`` first."""

        async def _ready_then_extract(page: Page) -> T:
            await page.wait_for_selector(
                target.ready_selector, state="attached", timeout=self.selector_timeout_ms
            )
            return await extract(page)

        return await self.fetch(target.url, _ready_then_extract)

    async def _attempt(self, url: str, extract: Extract[T]) -> T:
        logger.info("open url %s", url)
        browser = await self.browser.get_browser()
        page = await browser.new_page()
        try:
            await page.set_extra_http_headers(self.headers)
            await page.route("**/*", route_handler)
            await page.goto(url, wait_until="load", timeout=self.navigation_timeout_ms)
            return await extract(page)
        finally:
            try:
                await page.close()
            except PlaywrightError as exc:
                logger.debug("page for %s already closed: %s", url, exc)
