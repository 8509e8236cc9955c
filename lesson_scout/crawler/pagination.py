# lesson_scout/crawler/pagination.py
"""
Pagination discovery: read the last-page number from the listing root and
synthesise one URL per page.
"""
from __future__ import annotations

from typing import List, Optional

from playwright.async_api import Page

from lesson_scout.config import SiteSelectors
from lesson_scout.crawler.fetcher import PageFetcher
from lesson_scout.crawler.query import PageQuery
from lesson_scout.errors import PaginationError
from lesson_scout.models import FetchOutcome, PageTarget

PAGE_PARAM = "_paged"


def page_url(root_url: str, number: int) -> str:
    return f"{root_url}&{PAGE_PARAM}={number}"


def build_page_urls(root_url: str, last_page: int) -> List[str]:
    """``root&_paged=1`` … ``root&_paged=last_page`` in ascending order."""
    return [page_url(root_url, n) for n in range(1, last_page + 1)]


def parse_last_page(text: Optional[str]) -> int:
    if text is None:
        raise PaginationError("last-page indicator not found")
    try:
        value = int(text.strip())
    except ValueError:
        raise PaginationError(f"last-page indicator is not a number: {text!r}") from None
    if value < 1:
        raise PaginationError(f"last-page indicator must be >= 1, got {value}")
    return value


async def discover_pages(
    fetcher: PageFetcher, root_url: str, selectors: SiteSelectors
) -> FetchOutcome[List[str]]:
    """Fetch *root_url* and return every listing page URL."""

    async def _extract(page: Page) -> List[str]:
        text = await PageQuery(page).text(selectors.last_page)
        return build_page_urls(root_url, parse_last_page(text))

    return await fetcher.fetch_target(PageTarget(root_url, selectors.last_page), _extract)
