# lesson_scout/crawler/query.py
"""
Present/absent reads against a live page.

Every read returns ``None`` (or an empty list) when the element is missing.
A browser error while reading one field is logged as a
:class:`FieldExtractionError` and reported as absent, so one broken field
never hides the others.
"""
from __future__ import annotations

from typing import List, Optional
from urllib.parse import urljoin

from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError

from lesson_scout.errors import FieldExtractionError
from lesson_scout.logger import get_logger

__all__ = ["PageQuery"]

logger = get_logger(__name__)


class PageQuery:
    """Field reads for one page. *page* is a Playwright :class:`Page`."""

    def __init__(self, page: Page) -> None:
        self.page = page

    def _absent(self, field: str, exc: PlaywrightError) -> None:
        err = FieldExtractionError(field, exc)
        logger.debug("url %s: %s", self.page.url, err)

    async def first(self, selector: str) -> Optional[ElementHandle]:
        try:
            return await self.page.query_selector(selector)
        except PlaywrightError as exc:
            self._absent(selector, exc)
            return None

    async def text(self, selector: str, *, strip: bool = True) -> Optional[str]:
        """textContent of the first match."""
        element = await self.first(selector)
        if element is None:
            return None
        try:
            value = await element.text_content()
        except PlaywrightError as exc:
            self._absent(selector, exc)
            return None
        if value is None:
            return None
        return value.strip() if strip else value

    async def attr(self, selector: str, name: str) -> Optional[str]:
        element = await self.first(selector)
        if element is None:
            return None
        try:
            return await element.get_attribute(name)
        except PlaywrightError as exc:
            self._absent(f"{selector}@{name}", exc)
            return None

    async def href(self, selector: str) -> Optional[str]:
        """Absolute href of the first match, resolved against the page URL."""
        raw = await self.attr(selector, "href")
        if raw is None or not raw.strip():
            return None
        return urljoin(self.page.url, raw.strip())

    async def hrefs_within(self, container: str, anchor: str) -> List[str]:
        """Absolute hrefs of the first *anchor* inside every *container*, in document order."""
        try:
            nodes = await self.page.query_selector_all(container)
        except PlaywrightError as exc:
            self._absent(container, exc)
            return []
        urls: List[str] = []
        for node in nodes:
            try:
                link = await node.query_selector(anchor)
                raw = await link.get_attribute("href") if link is not None else None
            except PlaywrightError as exc:
                self._absent(f"{container} {anchor}", exc)
                continue
            if not raw or not raw.strip():
                logger.debug("url %s: container without %s", self.page.url, anchor)
                continue
            urls.append(urljoin(self.page.url, raw.strip()))
        return urls
