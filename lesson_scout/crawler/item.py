# lesson_scout/crawler/item.py
"""
Content-item extraction. Each field is read independently; a missing or
broken field is left absent and never stops the others.
"""
from __future__ import annotations

from typing import List, Optional

from playwright.async_api import Page

from lesson_scout.config import SiteSelectors
from lesson_scout.crawler.fetcher import PageFetcher
from lesson_scout.crawler.query import PageQuery
from lesson_scout.dates import parse_date
from lesson_scout.logger import get_logger
from lesson_scout.models import ContentRecord, FetchOutcome, PageTarget, fallback_record_id, utcnow

logger = get_logger(__name__)


def split_tags(text: Optional[str]) -> List[str]:
    """Comma-separated anchor text -> trimmed, non-empty tags."""
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def id_from_canonical(href: Optional[str]) -> Optional[str]:
    """Second-to-last path segment of the canonical URL (``…/<id>/``)."""
    if not href:
        return None
    parts = href.split("/")
    if len(parts) < 2 or not parts[-2]:
        return None
    return parts[-2]


async def read_item(page: Page, item_url: str, selectors: SiteSelectors) -> ContentRecord:
    """Build a record from an already loaded item page."""
    query = PageQuery(page)

    media_url = await query.href(selectors.media_anchor)
    if media_url is None:
        logger.info("url %s has no media file", item_url)

    title = await query.text(selectors.title)
    if not title:
        logger.info("url %s has no title", item_url)
        title = None

    tags = split_tags(await query.text(selectors.keyword_tags))
    tags += split_tags(await query.text(selectors.series_tags))

    publish_date = parse_date(await query.text(selectors.publish_date))

    record_id = id_from_canonical(await query.href(selectors.canonical_link))
    if record_id is None:
        record_id = fallback_record_id(item_url)
        logger.warning("url %s has no canonical id, using %s", item_url, record_id)

    return ContentRecord(
        id=record_id,
        url=item_url,
        media_url=media_url,
        title=title,
        tags=tuple(tags),
        publish_date=publish_date,
        last_updated=utcnow(),
    )


async def extract_item(
    fetcher: PageFetcher, item_url: str, selectors: SiteSelectors
) -> FetchOutcome[ContentRecord]:
    async def _extract(page: Page) -> ContentRecord:
        return await read_item(page, item_url, selectors)

    return await fetcher.fetch_target(PageTarget(item_url, selectors.item_ready), _extract)
