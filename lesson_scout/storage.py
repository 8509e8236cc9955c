# File: lesson_scout/storage.py
"""lesson_scout.storage: append-only JSON snapshot store on the local disk.

Layout::

    <root>/<subject_key>/snapshot-20240101T120000000000Z.json

Every :meth:`LocalSnapshotStore.store_snapshot` call creates a new file;
earlier snapshots are never rewritten.
"""
from __future__ import annotations

import asyncio
import json
import os
from datetime import timezone
from pathlib import Path
from typing import List, Union

from lesson_scout.errors import StorageError
from lesson_scout.logger import get_logger
from lesson_scout.models import SnapshotSet

__all__ = ["LocalSnapshotStore"]

logger = get_logger(__name__)

_PREFIX = "snapshot-"
_SUFFIX = ".json"


class LocalSnapshotStore:
    """Snapshot store keeping one directory of versioned JSON files per subject."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root).expanduser()

    def _subject_dir(self, subject_key: str) -> Path:
        return self.root / subject_key

    def list_snapshots(self, subject_key: str) -> List[Path]:
        """Snapshot files of *subject_key*, oldest first."""
        folder = self._subject_dir(subject_key)
        if not folder.is_dir():
            return []
        return sorted(folder.glob(f"{_PREFIX}*{_SUFFIX}"))

    def _read(self, subject_key: str) -> SnapshotSet:
        files = self.list_snapshots(subject_key)
        if not files:
            logger.info("No stored snapshot for %s yet", subject_key)
            return SnapshotSet.empty(subject_key)
        latest = files[-1]
        try:
            data = json.loads(latest.read_text(encoding="utf-8"))
            snapshot = SnapshotSet.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise StorageError(f"cannot read snapshot {latest}: {exc}") from exc
        logger.debug("Loaded %s (%d records)", latest, len(snapshot.records))
        return snapshot

    def _write(self, snapshot: SnapshotSet) -> Path:
        stamp = snapshot.captured_at.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        folder = self._subject_dir(snapshot.subject_key)
        target = folder / f"{_PREFIX}{stamp}{_SUFFIX}"
        tmp = target.with_suffix(".tmp")
        if target.exists():
            raise StorageError(f"snapshot {target} already exists")
        try:
            folder.mkdir(parents=True, exist_ok=True)
            try:
                with tmp.open("w", encoding="utf-8") as f:
                    json.dump(snapshot.to_dict(), f, ensure_ascii=False, indent=2)
                os.replace(tmp, target)
            finally:
                tmp.unlink(missing_ok=True)
        except Exception as exc:
            raise StorageError(f"cannot write snapshot {target}: {exc}") from exc
        logger.info("Stored snapshot %s (%d records)", target, len(snapshot.records))
        return target

    async def get_last_snapshot(self, subject_key: str) -> SnapshotSet:
        """Newest snapshot of *subject_key*; an empty one when none exists."""
        return await asyncio.to_thread(self._read, subject_key)

    async def store_snapshot(self, snapshot: SnapshotSet) -> Path:
        """Persist *snapshot* as a new version and return its path."""
        return await asyncio.to_thread(self._write, snapshot.copy())
