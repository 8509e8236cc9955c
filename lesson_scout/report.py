# lesson_scout/report.py

"""
JSON export of a stored snapshot.
"""
import json
from pathlib import Path
from typing import Any, Dict, List

from lesson_scout.models import ContentRecord, SnapshotSet


def select_records(snapshot: SnapshotSet, *, only_invalid: bool = False) -> List[ContentRecord]:
    if only_invalid:
        return [r for r in snapshot.records if not r.valid]
    return list(snapshot.records)


def summarize(snapshot: SnapshotSet) -> Dict[str, Any]:
    invalid = sum(1 for r in snapshot.records if not r.valid)
    return {
        "subject_key": snapshot.subject_key,
        "captured_at": snapshot.captured_at.isoformat(),
        "records": len(snapshot.records),
        "invalid": invalid,
    }


def render_json(snapshot: SnapshotSet, output_path: Path | str, *, only_invalid: bool = False) -> Path:
    """
    Save the records of *snapshot* as JSON at *output_path*.

    :param snapshot: snapshot to export
    :param output_path: path of the JSON file
    :param only_invalid: export only records whose page could not be parsed
    :return: Path of the written file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = summarize(snapshot)
    data["items"] = [r.to_dict() for r in select_records(snapshot, only_invalid=only_invalid)]

    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
