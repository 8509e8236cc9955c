# File: lesson_scout/dates.py
"""lesson_scout.dates: publish dates written with Hebrew Gregorian month names.

The site renders the date inside parentheses, e.g. ``"... (מרץ 14, 2021)"``.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Final, Optional, Tuple

from lesson_scout.logger import get_logger

__all__ = ["HEBREW_MONTHS", "lookup_month", "parse_date"]

logger = get_logger(__name__)

HEBREW_MONTHS: Final[Dict[str, int]] = {
    "ינואר": 0,
    "פברואר": 1,
    "מרץ": 2,
    "אפריל": 3,
    "מאי": 4,
    "יוני": 5,
    "יולי": 6,
    "אוגוסט": 7,
    "ספטמבר": 8,
    "אוקטובר": 9,
    "נובמבר": 10,
    "דצמבר": 11,
}

NOT_FOUND: Final[int] = -1


def lookup_month(name: str) -> Tuple[bool, int]:
    """Return ``(found, zero_based_index)``; ``(False, -1)`` for unknown names."""
    index = HEBREW_MONTHS.get(name.strip())
    if index is None:
        return False, NOT_FOUND
    return True, index


def parse_date(raw: Optional[str]) -> Optional[datetime]:
    """Parse ``"(<month> <day>, <year>)"`` into midnight UTC.

    Returns None (and logs) on any failure; never raises.
    """
    if not raw:
        return None
    start = raw.find("(")
    end = raw.find(")", start + 1)
    if start < 0 or end < 0:
        logger.warning("could not parse date %r: no parenthesised part", raw)
        return None

    # only the comma after the day is tolerated
    tokens = [token.removesuffix(",") for token in raw[start + 1:end].split()]
    if len(tokens) != 3:
        logger.warning("could not parse date %r: expected 3 tokens, got %d", raw, len(tokens))
        return None
    month_name, day_text, year_text = tokens

    found, month = lookup_month(month_name)
    if not found:
        logger.warning("could not parse date %r: unknown month %r", raw, month_name)
        return None

    try:
        return datetime(int(year_text), month + 1, int(day_text), tzinfo=timezone.utc)
    except (ValueError, OverflowError) as exc:
        logger.error("could not parse date %r: %s", raw, exc)
        return None
