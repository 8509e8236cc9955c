# lesson_scout/crawler/listing.py
"""Listing pages: collect content-item URLs in document order."""
from __future__ import annotations

from typing import List

from playwright.async_api import Page

from lesson_scout.config import SiteSelectors
from lesson_scout.crawler.fetcher import PageFetcher
from lesson_scout.crawler.query import PageQuery
from lesson_scout.logger import get_logger
from lesson_scout.models import FetchOutcome, PageTarget

logger = get_logger(__name__)


async def extract_item_urls(
    fetcher: PageFetcher, listing_url: str, selectors: SiteSelectors
) -> FetchOutcome[List[str]]:
    """Item URLs of one listing page. No item containers -> empty list."""

    async def _extract(page: Page) -> List[str]:
        urls = await PageQuery(page).hrefs_within(selectors.listing_item, selectors.listing_anchor)
        logger.debug("%s: %d item links", listing_url, len(urls))
        return urls

    return await fetcher.fetch_target(PageTarget(listing_url, selectors.listing_grid), _extract)
