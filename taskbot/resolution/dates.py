"""Due-date normalisation.

``parse_due`` returns a tri-state result so callers never confuse an explicit
"skip" with text that simply failed to parse.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from dateutil import parser as date_parser

SKIP_KEYWORD = "skip"

_RELATIVE_DAYS = re.compile(r"in\s+(\d+)\s+day", re.IGNORECASE)

# Tried in order; the first strict parse wins
_STRICT_FORMATS = (
    re.compile(r"^(?P<y>\d{4})-(?P<m>\d{2})-(?P<d>\d{2})$"),  # YYYY-MM-DD
    re.compile(r"^(?P<d>\d{2})-(?P<m>\d{2})-(?P<y>\d{4})$"),  # DD-MM-YYYY
    re.compile(r"^(?P<d>\d{1,2})-(?P<m>\d{1,2})-(?P<y>\d{4})$"),  # D-M-YYYY
    re.compile(r"^(?P<d>\d{2})/(?P<m>\d{2})/(?P<y>\d{4})$"),  # DD/MM/YYYY
    re.compile(r"^(?P<d>\d{1,2})/(?P<m>\d{1,2})/(?P<y>\d{4})$"),  # D/M/YYYY
)

# Lenient parsing is only attempted on text that reads like words, so
# numeric garbage such as "2025-13-50" can't be bent into a nearby date.
_WORDY_DATE = re.compile(
    r"\b(jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\b"
    r"|\b(mon|tue|tues|wed|thu|thur|thurs|fri|sat|sun)[a-z]*\b",
    re.IGNORECASE,
)


class DueKind(Enum):
    """Outcome of due-date parsing."""

    SKIPPED = "skipped"
    PARSED = "parsed"
    INVALID = "invalid"


@dataclass(frozen=True)
class DueDate:
    """Tri-state due date: explicit skip, a calendar date, or unparseable."""

    kind: DueKind
    value: date | None = None

    @property
    def is_resolved(self) -> bool:
        """True when the user decided (a date or an explicit skip)."""
        return self.kind is not DueKind.INVALID

    @classmethod
    def skipped(cls) -> "DueDate":
        return cls(DueKind.SKIPPED)

    @classmethod
    def parsed(cls, value: date) -> "DueDate":
        return cls(DueKind.PARSED, value)

    @classmethod
    def invalid(cls) -> "DueDate":
        return cls(DueKind.INVALID)


def _strict_parse(text: str) -> date | None:
    for pattern in _STRICT_FORMATS:
        match = pattern.match(text)
        if not match:
            continue
        try:
            return date(int(match["y"]), int(match["m"]), int(match["d"]))
        except ValueError:
            # Right shape, impossible calendar date: strict means no coercion
            return None
    return None


def _offset(today: date, days: int) -> DueDate:
    # Offsets beyond date.max count as unparseable
    try:
        return DueDate.parsed(today + timedelta(days=days))
    except (OverflowError, ValueError):
        return DueDate.invalid()


def _lenient_parse(text: str, today: date) -> date | None:
    if not _WORDY_DATE.search(text):
        return None
    default = datetime(today.year, today.month, today.day)
    try:
        return date_parser.parse(text, default=default, dayfirst=True, fuzzy=True).date()
    except (ValueError, OverflowError):
        return None


def parse_due(text: str | None, today: date) -> DueDate:
    """Normalise a due-date expression.

    Args:
        text: User or model supplied text ("skip", "today", "in 3 days",
            "2025-10-12", "12/10/2025", "next friday", ...).
        today: Reference date for relative expressions.

    Returns:
        ``DueDate`` with kind SKIPPED, PARSED (with value) or INVALID.
    """
    if text is None:
        return DueDate.invalid()
    cleaned = text.strip()
    lowered = cleaned.lower()
    if not cleaned:
        return DueDate.invalid()

    if lowered == SKIP_KEYWORD:
        return DueDate.skipped()
    if lowered == "today":
        return DueDate.parsed(today)
    if lowered == "tomorrow":
        return _offset(today, 1)

    relative = _RELATIVE_DAYS.search(cleaned)
    if relative:
        return _offset(today, int(relative.group(1)))

    strict = _strict_parse(cleaned)
    if strict is not None:
        return DueDate.parsed(strict)

    lenient = _lenient_parse(cleaned, today)
    if lenient is not None:
        return DueDate.parsed(lenient)

    return DueDate.invalid()
