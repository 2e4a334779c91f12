"""Extraction of meeting patterns from Workday "Meeting Patterns" cells."""

import logging
import re
from datetime import date, time
from typing import Optional

from bs4 import BeautifulSoup

from .days import parse_days
from .models import MeetingPattern, PatternStatus
from .normalize import normalize_time, parse_date

LOG = logging.getLogger(__name__)

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"
_DATE = rf"(?:{_MONTH}\s+\d{{1,2}}(?:,?\s+\d{{4}})?|\d{{4}}-\d{{2}}-\d{{2}})"
_TIME = r"(?<![\d:])\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m\.?(?![a-z]))?"
_RANGE_SEP = r"\s*[-–—to]+\s*"

DATE_RANGE_RE = re.compile(rf"({_DATE}){_RANGE_SEP}({_DATE})", re.IGNORECASE)
SINGLE_DATE_RE = re.compile(rf"\b{_DATE}(?!\d)", re.IGNORECASE)
TIME_RANGE_RE = re.compile(rf"({_TIME}){_RANGE_SEP}({_TIME})(?!\d)", re.IGNORECASE)
DAY_TOKEN_RE = re.compile(
    r"\b(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday|"
    r"Tues|Thurs|Thur|Mon|Tue|Wed|Thu|Fri|Sat|Sun|Mo|Tu|We|Th|Fr|Sa|Su)\b",
    re.IGNORECASE,
)
TRAILING_PIPE_RE = re.compile(r"\|\s*([^|]+)$")
ROOM_RE = re.compile(r"\b([A-Z][A-Z0-9]+\s+\d{2,}[A-Z]?)\b")

_BLANK_LINES_RE = re.compile(r"\n\s*\n")


def parse_time_range(text: str) -> tuple[Optional[time], Optional[time]]:
    """Parse a time range such as "10:00 AM - 11:30 AM" into start and end."""
    match = TIME_RANGE_RE.search(text or "")
    if not match:
        return None, None
    return normalize_time(match.group(1)), normalize_time(match.group(2))


def parse_date_range(
    text: str, default_year: Optional[int] = None
) -> tuple[Optional[date], Optional[date]]:
    """Parse a date range such as "2024-09-03 - 2024-12-05" into start and end."""
    match = DATE_RANGE_RE.search(text or "")
    if not match:
        return None, None
    return (
        parse_date(match.group(1), default_year),
        parse_date(match.group(2), default_year),
    )


def _blank(text: str, match: Optional[re.Match]) -> str:
    if not match:
        return text
    return text[:match.start()] + " " * (match.end() - match.start()) + text[match.end():]


def _parse_strict(block: str, default_year: Optional[int]) -> Optional[MeetingPattern]:
    """Parse "Days | Time Range | Date Range | Location"."""
    if "|" not in block:
        return None

    parts = [part.strip() for part in block.split("|")]
    if len(parts) < 2:
        return None

    days = parse_days(parts[0])
    if not days:
        return None

    start_time, end_time = parse_time_range(parts[1])
    start_date, end_date = (
        parse_date_range(parts[2], default_year) if len(parts) > 2 else (None, None)
    )
    location = " | ".join(part for part in parts[3:] if part)

    return MeetingPattern(
        days=days,
        start_time=start_time,
        end_time=end_time,
        start_date=start_date,
        end_date=end_date,
        location=location,
    )


def _parse_fuzzy(block: str, default_year: Optional[int]) -> MeetingPattern:
    """Look for a date range, time range, day names and a room anywhere in the block."""
    # Dates go first, otherwise "2024-09" reads as a time range.
    date_match = DATE_RANGE_RE.search(block)
    single_date_match = None if date_match else SINGLE_DATE_RE.search(block)
    remainder = _blank(block, date_match or single_date_match)

    time_match = TIME_RANGE_RE.search(remainder)
    remainder = _blank(remainder, time_match)

    day_tokens = DAY_TOKEN_RE.findall(remainder)
    remainder = DAY_TOKEN_RE.sub(lambda m: " " * len(m.group(0)), remainder)

    location = ""
    pipe_match = TRAILING_PIPE_RE.search(remainder)
    if pipe_match and pipe_match.group(1).strip():
        location = re.sub(r"\s{2,}", " ", pipe_match.group(1)).strip()
    else:
        room_match = ROOM_RE.search(remainder)
        if room_match:
            location = room_match.group(1)

    start_time = end_time = None
    if time_match:
        start_time = normalize_time(time_match.group(1))
        end_time = normalize_time(time_match.group(2))

    start_date = end_date = None
    if date_match:
        start_date = parse_date(date_match.group(1), default_year)
        end_date = parse_date(date_match.group(2), default_year)
    elif single_date_match:
        start_date = parse_date(single_date_match.group(0), default_year)

    return MeetingPattern(
        days=parse_days(" ".join(day_tokens)),
        start_time=start_time,
        end_time=end_time,
        start_date=start_date,
        end_date=end_date,
        location=location,
    )


def parse_single_pattern(
    block: str, default_year: Optional[int] = None
) -> Optional[MeetingPattern]:
    """Parse one meeting pattern block.

    Strict pipe-delimited parsing is tried first; when it does not apply
    or finds no days, fields are searched for anywhere in the text.

    Args:
        block: A single meeting pattern, e.g.
            "Mon Wed | 10:00 - 11:00 | 2024-09-03 - 2024-12-05 | Room 200".
        default_year: Year for textual dates that omit one.

    Returns:
        The pattern tagged PARSED or PARTIAL, or None if nothing at all
        could be recovered.
    """
    pattern = _parse_strict(block, default_year)
    if pattern is None:
        pattern = _parse_fuzzy(block, default_year)

    if not pattern.has_any_field():
        return None

    pattern.raw = block
    pattern.status = PatternStatus.PARSED if pattern.is_valid else PatternStatus.PARTIAL
    return pattern


def _clean_markup(text: str) -> str:
    soup = BeautifulSoup(text, "lxml")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    return soup.get_text().replace("\xa0", " ")


def split_pattern_blocks(text: str) -> list[str]:
    """Split a Meeting Patterns cell into one string per meeting pattern.

    Patterns are separated by blank lines (or doubled <br> tags). A block
    in which every line is pipe-delimited holds one pattern per line.
    """
    if not text or not text.strip():
        return []

    if "<" in text or "&" in text:
        text = _clean_markup(text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    blocks: list[str] = []
    for chunk in _BLANK_LINES_RE.split(text):
        lines = [line.strip() for line in chunk.split("\n") if line.strip()]
        if not lines:
            continue
        if len(lines) > 1 and all("|" in line for line in lines):
            blocks.extend(lines)
        else:
            blocks.append(" ".join(lines))
    return blocks


def parse_meeting_patterns(text: str, default_year: Optional[int] = None) -> list[MeetingPattern]:
    """Parse every meeting pattern in a cell.

    Each block yields exactly one pattern. Blocks with nothing
    recognizable are kept as EMPTY patterns so the raw text can still
    be shown.
    """
    patterns: list[MeetingPattern] = []
    for block in split_pattern_blocks(text):
        pattern = parse_single_pattern(block, default_year)
        if pattern is None:
            LOG.debug("No schedule fields found in %r", block)
            pattern = MeetingPattern(raw=block, status=PatternStatus.EMPTY)
        patterns.append(pattern)
    return patterns
