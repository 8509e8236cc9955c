# File: lesson_scout/engine.py
"""lesson_scout.engine: incremental crawl of one subject against its last snapshot.

States::

    IDLE -> ANNOUNCED -> PAGINATION_DISCOVERED -> PAGE_SCAN(i) -> FINALIZING -> COMPLETED
                                       any state -> FAILED

Known item URLs are never fetched again; new records (valid or not) are
appended and the merged set is stored as a new snapshot version.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from lesson_scout.config import ScraperConfig
from lesson_scout.crawler.fetcher import PageFetcher
from lesson_scout.crawler.item import extract_item
from lesson_scout.crawler.listing import extract_item_urls
from lesson_scout.crawler.pagination import discover_pages
from lesson_scout.errors import ItemFatalError, NotificationError, StageFatalError, StorageError
from lesson_scout.logger import get_logger
from lesson_scout.models import ContentRecord, SnapshotSet, utcnow
from lesson_scout.notifications import Notifier

__all__ = ["CrawlState", "CrawlResult", "CrawlEngine"]

logger = get_logger(__name__)


class CrawlState(str, Enum):
    IDLE = "idle"
    ANNOUNCED = "announced"
    PAGINATION_DISCOVERED = "pagination_discovered"
    PAGE_SCAN = "page_scan"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    FAILED = "failed"


class SnapshotStore(Protocol):
    async def get_last_snapshot(self, subject_key: str) -> SnapshotSet: ...

    async def store_snapshot(self, snapshot: SnapshotSet) -> Any: ...


class BrowserResource(Protocol):
    async def get_browser(self) -> Any: ...

    async def close(self) -> None: ...


@dataclass(slots=True)
class CrawlResult:
    """Summary of one run."""

    state: CrawlState = CrawlState.IDLE
    snapshot: Optional[SnapshotSet] = None
    prior_count: int = 0
    new_records: List[ContentRecord] = field(default_factory=list)
    skipped: int = 0
    failed_items: List[str] = field(default_factory=list)
    failed_pages: List[str] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.state is CrawlState.COMPLETED


class CrawlEngine:
    """Runs one sequential crawl. Owns the working record set for the run."""

    def __init__(
        self,
        config: ScraperConfig,
        *,
        browser: BrowserResource,
        fetcher: PageFetcher,
        store: SnapshotStore,
        notifier: Notifier,
    ) -> None:
        self.config = config
        self.browser = browser
        self.fetcher = fetcher
        self.store = store
        self.notifier = notifier
        self.state = CrawlState.IDLE

    def _enter(self, state: CrawlState, detail: str = "") -> None:
        logger.debug("crawl state %s -> %s %s", self.state.value, state.value, detail)
        self.state = state

    async def _notify(self, message: str, level: str = "info") -> None:
        if level == "error":
            logger.error("%s", message)
        else:
            logger.info("%s", message)
        try:
            await self.notifier.send_message(message)
        except NotificationError as exc:
            logger.warning("notification not delivered: %s", exc)
        except Exception as exc:
            logger.exception("notifier crashed: %r", exc)

    async def run(self) -> CrawlResult:
        result = CrawlResult()
        subject = self.config.subject_key
        try:
            await self._notify("start scraping")
            self._enter(CrawlState.ANNOUNCED)

            records = await self._load_prior(subject)
            result.prior_count = len(records)
            await self._notify(f"read {len(records)} lessons of {subject} from storage")

            await self.browser.get_browser()
            pages = await self._discover()
            self._enter(CrawlState.PAGINATION_DISCOVERED, f"({len(pages)} pages)")

            for index, page_url in enumerate(pages, start=1):
                self._enter(CrawlState.PAGE_SCAN, f"({index}/{len(pages)})")
                await self._scan_page(page_url, records, result)

            self._enter(CrawlState.FINALIZING)
            snapshot = SnapshotSet(subject_key=subject, captured_at=utcnow(), records=list(records.values()))
            await self._store(snapshot)
            result.snapshot = snapshot
            await self._notify(f"total of {len(snapshot.records)} lessons for {subject} saved to storage")
            self._enter(CrawlState.COMPLETED)
        except Exception as exc:
            self._enter(CrawlState.FAILED)
            result.error = exc
            await self._notify(f"error in crawl of {subject}: {exc}", "error")
        finally:
            await self._release_browser()
        result.state = self.state
        return result

    async def _load_prior(self, subject: str) -> Dict[str, ContentRecord]:
        try:
            prior = await self.store.get_last_snapshot(subject)
        except StorageError as exc:
            raise StageFatalError("load_snapshot", exc) from exc
        return {record.url: record for record in prior.records}

    async def _discover(self) -> List[str]:
        outcome = await discover_pages(self.fetcher, self.config.root_url, self.config.selectors)
        if not outcome.ok:
            raise StageFatalError("pagination", outcome.error)
        return outcome.unwrap()

    async def _scan_page(
        self, page_url: str, records: Dict[str, ContentRecord], result: CrawlResult
    ) -> None:
        listing = await extract_item_urls(self.fetcher, page_url, self.config.selectors)
        if not listing.ok:
            logger.error("listing page %s skipped: %s", page_url, listing.error)
            result.failed_pages.append(page_url)
            return

        for item_url in listing.unwrap():
            if item_url in records:
                logger.debug("%s already exists", item_url)
                result.skipped += 1
                continue
            outcome = await extract_item(self.fetcher, item_url, self.config.selectors)
            if not outcome.ok:
                logger.error("%s", ItemFatalError(item_url, outcome.error))
                result.failed_items.append(item_url)
                continue
            record = self._apply_date_policy(outcome.unwrap())
            if not record.valid:
                logger.info("%s is invalid", item_url)
            records[item_url] = record
            result.new_records.append(record)
            logger.info("%s %s saved", page_url, record.id)

    def _apply_date_policy(self, record: ContentRecord) -> ContentRecord:
        if record.publish_date is not None or self.config.publish_date_fallback != "now":
            return record
        logger.info("%s has no publish date, defaulting to now", record.url)
        return dataclasses.replace(record, publish_date=utcnow())

    async def _store(self, snapshot: SnapshotSet) -> None:
        try:
            await self.store.store_snapshot(snapshot.copy())
        except StorageError as exc:
            raise StageFatalError("store_snapshot", exc) from exc

    async def _release_browser(self) -> None:
        try:
            await self.browser.close()
        except Exception as exc:
            logger.error("cannot close browser: %s", exc)
