# File: lesson_scout/browser.py
"""lesson_scout.browser: one Chromium instance shared by a whole crawl run."""
from __future__ import annotations

from typing import List, Optional

from playwright.async_api import Browser, Playwright, async_playwright

from lesson_scout.logger import get_logger

__all__ = ["CHROME_ARGS", "BrowserProvider"]

logger = get_logger(__name__)

CHROME_ARGS: List[str] = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-dev-shm-usage",
]


class BrowserProvider:
    """Lazily launches Chromium on first use; :meth:`close` releases it."""

    def __init__(self, headless: bool = True, args: Optional[List[str]] = None) -> None:
        self.headless = headless
        self.args = list(CHROME_ARGS if args is None else args)
        self._pw: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def get_browser(self) -> Browser:
        if self._browser is None:
            logger.info("Launching Chromium (headless=%s)", self.headless)
            self._pw = await async_playwright().start()
            self._browser = await self._pw.chromium.launch(headless=self.headless, args=self.args)
        return self._browser

    async def close(self) -> None:
        """Close the browser and stop Playwright. Safe to call more than once."""
        browser, pw = self._browser, self._pw
        self._browser = None
        self._pw = None
        try:
            if browser is not None:
                await browser.close()
                logger.info("Browser closed")
        finally:
            if pw is not None:
                await pw.stop()

    async def __aenter__(self) -> BrowserProvider:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
