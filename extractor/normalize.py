"""Normalization of spreadsheet date and time values."""

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

# Serial 25569 is 1970-01-01 in spreadsheet day numbering.
SERIAL_EPOCH = date(1970, 1, 1) - timedelta(days=25569)
SERIAL_THRESHOLD = 20000

_ISO_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_TEXT_DATE_RE = re.compile(r"([A-Za-z]{3})[a-z]*\.?\s+(\d{1,2})(?:,?\s+(\d{4}))?", re.IGNORECASE)
_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)?")
_BARE_HOUR_RE = re.compile(r"^(\d{1,2})(?=\D|$)")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_time(value: Any) -> Optional[time]:
    """Normalize a time cell to a 24-hour time.

    Accepts "14:30", "2:30 PM", "2:30 p.m.", bare hours such as "9",
    time/datetime objects and spreadsheet day fractions (0.5 is noon).

    Args:
        value: Cell value holding a time.

    Returns:
        The time, or None if no hour:minute could be found.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return time(value.hour, value.minute)
    if isinstance(value, time):
        return time(value.hour, value.minute)
    if _is_number(value):
        if math.isnan(value):
            return None
        if 0 <= value < 1:
            minutes = int(round(value * 24 * 60)) % (24 * 60)
            return time(minutes // 60, minutes % 60)
        if float(value).is_integer():
            value = int(value)

    cleaned = str(value).strip().upper().replace(".", "")
    if ":" not in cleaned:
        cleaned = _BARE_HOUR_RE.sub(r"\1:00", cleaned, count=1)

    match = _CLOCK_RE.search(cleaned)
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3)

    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0

    try:
        return time(hours, minutes)
    except ValueError:
        return None


def _parse_serial(value: Any) -> Optional[date]:
    try:
        serial = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(serial) or serial <= SERIAL_THRESHOLD:
        return None
    try:
        return SERIAL_EPOCH + timedelta(days=math.floor(serial))
    except OverflowError:
        return None


def parse_date(value: Any, default_year: Optional[int] = None) -> Optional[date]:
    """Parse a date cell.

    Tries ISO dates ("2024-09-03"), spreadsheet serial numbers above
    20000 ("45538") and textual dates ("Sep 3, 2024", "Sept 3").

    Args:
        value: Cell value holding a date.
        default_year: Year used when a textual date has none. Defaults
            to the current year.

    Returns:
        The date, or None if nothing date-like was found.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if _is_number(value):
        return _parse_serial(value)

    text = str(value).strip()

    iso_match = _ISO_DATE_RE.search(text)
    if iso_match:
        year, month, day = map(int, iso_match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    serial_date = _parse_serial(text)
    if serial_date:
        return serial_date

    for match in _TEXT_DATE_RE.finditer(text):
        month = MONTHS.get(match.group(1).lower())
        if not month:
            continue
        if match.group(3):
            year = int(match.group(3))
        elif default_year is not None:
            year = default_year
        else:
            year = date.today().year
        try:
            return date(year, month, int(match.group(2)))
        except ValueError:
            return None

    return None


def format_time(value: Optional[time]) -> str:
    """Format a time for display, e.g. "2:00 PM"."""
    if value is None:
        return ""
    hours = value.hour % 12 or 12
    period = "PM" if value.hour >= 12 else "AM"
    return f"{hours}:{value.minute:02d} {period}"
