"""Event date parsing with year inference for year-less dates."""

from __future__ import annotations

import re
from datetime import date

from ..exceptions import ChatBetParseError, ErrorKind

UNPARSEABLE_DATE_REASON = (
    "Unable to parse date. Supported formats: "
    "YYYY-MM-DD, MM/DD/YYYY, YYYY/MM/DD, MM-DD-YYYY, MM/DD, MM-DD"
)
INVALID_CALENDAR_REASON = "Invalid calendar date (e.g., February 30th doesn't exist)"

_YEAR_FIRST_RE = re.compile(r"^(\d{4})[/-](\d{1,2})[/-](\d{1,2})$")
_YEAR_LAST_RE = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")
_SHORT_YEAR_RE = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2})$")
_NO_YEAR_RE = re.compile(r"^(\d{1,2})[/-](\d{1,2})$")

DATE_LIKE_RE = re.compile(r"^\d{1,4}[/-]\d{1,2}(?:[/-]\d{2,4})?$")


def _split_date(cleaned: str, reference: date) -> tuple[int, int, int] | None:
    if match := _YEAR_FIRST_RE.match(cleaned):
        return int(match.group(1)), int(match.group(2)), int(match.group(3))
    if match := _YEAR_LAST_RE.match(cleaned):
        return int(match.group(3)), int(match.group(1)), int(match.group(2))
    if match := _SHORT_YEAR_RE.match(cleaned):
        return 2000 + int(match.group(3)), int(match.group(1)), int(match.group(2))
    if match := _NO_YEAR_RE.match(cleaned):
        month, day = int(match.group(1)), int(match.group(2))
        year = reference.year
        try:
            if date(year, month, day) < reference:
                year += 1
        except ValueError:
            # Range and calendar checks happen below with the chosen year.
            pass
        return year, month, day
    return None


def parse_event_date(
    date_str: str,
    raw_input: str,
    *,
    writein: bool = False,
    reference_date: date | None = None,
) -> date:
    """Parse a chat date; MM/DD rolls to next year when already past."""
    kind: ErrorKind = "InvalidWriteinDate" if writein else "InvalidDate"
    cleaned = date_str.strip()
    if not cleaned:
        raise ChatBetParseError(
            "Date cannot be empty", kind=kind, raw_input=raw_input, detail=date_str
        )

    reference = reference_date or date.today()
    parts = _split_date(cleaned, reference)
    if parts is None:
        raise ChatBetParseError(
            UNPARSEABLE_DATE_REASON, kind=kind, raw_input=raw_input, detail=date_str
        )
    year, month, day = parts
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise ChatBetParseError(
            UNPARSEABLE_DATE_REASON, kind=kind, raw_input=raw_input, detail=date_str
        )
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise ChatBetParseError(
            INVALID_CALENDAR_REASON, kind=kind, raw_input=raw_input, detail=date_str
        ) from exc
