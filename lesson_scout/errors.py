# File: lesson_scout/errors.py
"""lesson_scout.errors: exception hierarchy for the crawl engine.

Propagation:

* field-level failures (:class:`FieldExtractionError`) are absorbed by the
  query layer and the field is left absent;
* a failed fetch attempt is a :class:`TransientFetchError`; when the retry
  budget runs out the fetcher reports :class:`ExhaustedRetriesError`;
* a single item that cannot be fetched becomes an :class:`ItemFatalError`
  and is skipped by the reconciler;
* pagination and storage failures are :class:`StageFatalError` and end the run.
"""
from __future__ import annotations

from typing import Optional

__all__ = [
    "ScoutError",
    "TransientFetchError",
    "ExhaustedRetriesError",
    "FieldExtractionError",
    "PaginationError",
    "StageFatalError",
    "ItemFatalError",
    "StorageError",
    "NotificationError",
]


class ScoutError(Exception):
    """Base class for every error raised by LessonScout."""


class TransientFetchError(ScoutError):
    """One fetch attempt failed (navigation, selector wait, extraction)."""

    def __init__(self, url: str, attempt: int, cause: BaseException) -> None:
        super().__init__(f"attempt {attempt} for {url} failed: {cause!r}")
        self.url = url
        self.attempt = attempt
        self.cause = cause


class ExhaustedRetriesError(ScoutError):
    """All configured attempts for *url* failed."""

    def __init__(self, url: str, attempts: int, last_error: Optional[BaseException]) -> None:
        super().__init__(f"cannot scrap {url} after {attempts} attempt(s): {last_error!r}")
        self.url = url
        self.attempts = attempts
        self.last_error = last_error


class FieldExtractionError(ScoutError):
    def __init__(self, field: str, cause: BaseException) -> None:
        super().__init__(f"cannot read field {field!r}: {cause}")
        self.field = field
        self.cause = cause


class PaginationError(ScoutError, ValueError):
    """The last-page indicator is absent or not a positive integer."""


class StageFatalError(ScoutError):
    """A crawl stage failed and the run cannot continue."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"stage {stage!r} failed: {cause}")
        self.stage = stage
        self.cause = cause


class ItemFatalError(ScoutError):
    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"item {url} skipped: {cause}")
        self.url = url
        self.cause = cause


class StorageError(ScoutError):
    """Snapshot could not be read or written."""


class NotificationError(ScoutError):
    """Notifier backend rejected or failed to deliver a message."""
