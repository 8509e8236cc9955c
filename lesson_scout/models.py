# lesson_scout/models.py
"""
Data models for LessonScout: content records, snapshots and fetch outcomes.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from lesson_scout.errors import ExhaustedRetriesError
from lesson_scout.logger import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

__all__ = [
    "ContentRecord",
    "SnapshotSet",
    "PageTarget",
    "FetchOutcome",
    "fallback_record_id",
    "utcnow",
]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def fallback_record_id(url: str) -> str:
    """Stable id for pages without a canonical link: first 16 hex chars of sha256(url)."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]


def _parse_dt(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        # JSON written by the previous deployment uses a trailing "Z"
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    # naive values are UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True, slots=True)
class ContentRecord:
    """One extracted content page (a lesson).

    ``valid`` is derived from ``media_url`` and ``title``; invalid records are
    kept so that pages with an unexpected layout can be inspected later.
    """

    id: str
    url: str
    media_url: Optional[str] = None
    title: Optional[str] = None
    tags: Tuple[str, ...] = ()
    publish_date: Optional[datetime] = None
    last_updated: datetime = field(default_factory=utcnow)

    @property
    def valid(self) -> bool:
        return self.media_url is not None and self.title is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "media_url": self.media_url,
            "title": self.title,
            "tags": list(self.tags),
            "publish_date": _iso(self.publish_date),
            "last_updated": _iso(self.last_updated),
            "valid": self.valid,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ContentRecord:
        """Build a record from stored JSON; camelCase keys of older snapshots are accepted."""
        url = data["url"]
        record_id = data.get("id") or fallback_record_id(url)
        last_updated = _parse_dt(data.get("last_updated", data.get("updatedAt")))
        return cls(
            id=str(record_id),
            url=url,
            media_url=data.get("media_url", data.get("mediaUrl")),
            title=data.get("title"),
            tags=tuple(data.get("tags") or ()),
            publish_date=_parse_dt(data.get("publish_date", data.get("date"))),
            last_updated=last_updated or utcnow(),
        )


@dataclass(slots=True)
class SnapshotSet:
    """Point-in-time set of records of one crawl subject, unique by ``url``."""

    subject_key: str
    captured_at: datetime
    records: List[ContentRecord] = field(default_factory=list)

    @classmethod
    def empty(cls, subject_key: str) -> SnapshotSet:
        return cls(subject_key=subject_key, captured_at=utcnow(), records=[])

    def urls(self) -> List[str]:
        return [r.url for r in self.records]

    def copy(self) -> SnapshotSet:
        return SnapshotSet(self.subject_key, self.captured_at, list(self.records))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject_key": self.subject_key,
            "captured_at": _iso(self.captured_at),
            "records": [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SnapshotSet:
        subject = data.get("subject_key", data.get("rabbi"))
        if not subject:
            raise ValueError("snapshot has no subject key")
        raw_records = data.get("records", data.get("lessons")) or []
        captured = _parse_dt(data.get("captured_at", data.get("date"))) or utcnow()
        return cls(
            subject_key=str(subject),
            captured_at=captured,
            records=_unique_by_url(ContentRecord.from_dict(r) for r in raw_records),
        )


def _unique_by_url(records: Iterable[ContentRecord]) -> List[ContentRecord]:
    seen: Dict[str, ContentRecord] = {}
    for record in records:
        if record.url in seen:
            logger.warning("Duplicate record %s in snapshot, keeping the first one", record.url)
            continue
        seen[record.url] = record
    return list(seen.values())


@dataclass(frozen=True, slots=True)
class PageTarget:
    """A URL and the selector that marks it as ready for extraction."""

    url: str
    ready_selector: str


@dataclass(frozen=True)
class FetchOutcome(Generic[T]):
    """Result of the retry-governed fetch: a value or the exhausted-retries error."""

    url: str
    attempts: int
    value: Optional[T] = None
    error: Optional[ExhaustedRetriesError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, url: str, value: T, attempts: int) -> FetchOutcome[T]:
        return cls(url=url, attempts=attempts, value=value)

    @classmethod
    def failure(cls, url: str, error: ExhaustedRetriesError) -> FetchOutcome[T]:
        return cls(url=url, attempts=error.attempts, error=error)
