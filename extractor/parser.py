"""Row parser for Workday schedule exports."""

import logging
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, time
from typing import Any, Optional

from .days import parse_days
from .models import CourseInfo, MeetingEvent, MeetingPattern, ParseResult, PatternStatus
from .normalize import normalize_time, parse_date
from .patterns import parse_meeting_patterns

LOG = logging.getLogger(__name__)

_COURSE_TITLE_RE = re.compile(r"^([A-Z]{2,4}(?:_[A-Z])?\s*\d{3}[A-Z]?)\s*[-–—]\s*(.+)$", re.IGNORECASE)


def is_blank(value: Any) -> bool:
    """Return True for empty cells: None, NaN and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def cell_text(value: Any) -> str:
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def find_column_value(row: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """Find a cell by any of its possible column names.

    Header names are compared case-insensitively with surrounding
    whitespace ignored. The first matching column of the row wins.

    Args:
        row: Mapping of column name to cell value.
        aliases: Accepted column names.

    Returns:
        The cell value, or None if no column matches.
    """
    if not row:
        return None
    wanted = {alias.lower() for alias in aliases}
    for key, value in row.items():
        if str(key).strip().lower() in wanted:
            return value
    return None


def parse_course_title(text: str) -> CourseInfo:
    """Split "CPSC 110 - Computation, Programs, and Programming" into code and title."""
    if not text:
        return CourseInfo(code="Unknown", title="")

    match = _COURSE_TITLE_RE.match(text)
    if match:
        return CourseInfo(code=match.group(1).strip().upper(), title=match.group(2).strip())
    return CourseInfo(code=text[:20], title=text)


@dataclass
class ExplicitColumns:
    """Schedule data found in dedicated date, time and day columns."""

    days: list[str] = field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    def has_any(self) -> bool:
        return bool(self.days) or any(
            value is not None
            for value in (self.start_date, self.end_date, self.start_time, self.end_time)
        )


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


class ScheduleParser:
    """Parser turning spreadsheet rows into meeting events.

    Each row describes one course section. Its "Meeting Patterns" cell
    may hold several patterns; separate date, time and day columns,
    when present, fill whatever the patterns are missing.
    """

    COURSE_LISTING = ("Course Listing",)
    SECTION = ("Section",)
    INSTRUCTIONAL_FORMAT = ("Instructional Format",)
    DELIVERY_MODE = ("Delivery Mode",)
    MEETING_PATTERNS = ("Meeting Patterns",)
    INSTRUCTOR = ("Instructor",)

    START_DATE = ("Start Date", "Meeting Start Date", "First Meeting Date")
    END_DATE = ("End Date", "Meeting End Date", "Last Meeting Date")
    START_TIME = ("Start Time", "Meeting Start Time")
    END_TIME = ("End Time", "Meeting End Time")
    DAYS = ("Days", "Meeting Days", "Day Pattern")

    def __init__(self, default_year: Optional[int] = None) -> None:
        """Initialize the parser.

        Args:
            default_year: Year assumed for textual dates without one
                (e.g. "Sep 3"). Defaults to the current year.
        """
        self._default_year = default_year if default_year is not None else date.today().year

    def _text(self, row: Mapping[str, Any], aliases: Sequence[str]) -> str:
        return cell_text(find_column_value(row, aliases))

    def _explicit_columns(self, row: Mapping[str, Any]) -> ExplicitColumns:
        explicit = ExplicitColumns()

        days = find_column_value(row, self.DAYS)
        if not is_blank(days):
            explicit.days = parse_days(days)

        for attr, aliases in (("start_date", self.START_DATE), ("end_date", self.END_DATE)):
            value = find_column_value(row, aliases)
            if not is_blank(value):
                setattr(explicit, attr, parse_date(value, self._default_year))

        for attr, aliases in (("start_time", self.START_TIME), ("end_time", self.END_TIME)):
            value = find_column_value(row, aliases)
            if not is_blank(value):
                setattr(explicit, attr, normalize_time(value))

        return explicit

    @staticmethod
    def _status(pattern: MeetingPattern) -> PatternStatus:
        if pattern.is_valid:
            return PatternStatus.PARSED
        return PatternStatus.PARTIAL if pattern.has_any_field() else PatternStatus.EMPTY

    def _reconcile(
        self,
        patterns: list[MeetingPattern],
        explicit: ExplicitColumns,
        raw: str,
    ) -> list[MeetingPattern]:
        """Combine extracted patterns with the explicit columns of the row."""
        if not patterns or (len(patterns) == 1 and patterns[0].low_confidence):
            if not explicit.has_any():
                return patterns

            # Explicit columns win; the flagged pattern only fills gaps.
            base = patterns[0] if patterns else MeetingPattern()
            pattern = MeetingPattern(
                days=list(explicit.days or base.days),
                start_time=_first(explicit.start_time, base.start_time),
                end_time=_first(explicit.end_time, base.end_time),
                start_date=_first(explicit.start_date, base.start_date),
                end_date=_first(explicit.end_date, base.end_date),
                location=base.location,
                raw=raw,
            )
            pattern.status = self._status(pattern)
            return [pattern]

        merged: list[MeetingPattern] = []
        for pattern in patterns:
            filled = replace(
                pattern,
                days=list(pattern.days or explicit.days),
                start_time=_first(pattern.start_time, explicit.start_time),
                end_time=_first(pattern.end_time, explicit.end_time),
                start_date=_first(pattern.start_date, explicit.start_date),
                end_date=_first(pattern.end_date, explicit.end_date),
            )
            filled.status = self._status(filled)
            merged.append(filled)
        return merged

    def parse_row(self, row: Mapping[str, Any]) -> list[MeetingEvent]:
        """Parse a single row into one event per meeting pattern.

        Args:
            row: Mapping of column name to cell value.

        Returns:
            List of MeetingEvent objects, empty if the row has no schedule.
        """
        course = parse_course_title(self._text(row, self.COURSE_LISTING))
        meeting_text = self._text(row, self.MEETING_PATTERNS)

        patterns = parse_meeting_patterns(meeting_text, self._default_year)
        patterns = self._reconcile(patterns, self._explicit_columns(row), meeting_text)

        section = self._text(row, self.SECTION)
        instructional_format = self._text(row, self.INSTRUCTIONAL_FORMAT)
        delivery_mode = self._text(row, self.DELIVERY_MODE)
        instructor = self._text(row, self.INSTRUCTOR)

        return [
            MeetingEvent(
                course_code=course.code,
                course_title=course.title,
                section=section,
                format=instructional_format,
                delivery_mode=delivery_mode,
                instructor=instructor,
                days=list(pattern.days),
                start_time=pattern.start_time,
                end_time=pattern.end_time,
                start_date=pattern.start_date,
                end_date=pattern.end_date,
                location=pattern.location,
                raw=pattern.raw or meeting_text,
            )
            for pattern in patterns
        ]

    def filter_data_rows(self, rows: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
        """Drop repeated header rows and rows without any data."""
        data_rows = []
        for row in rows:
            listing = find_column_value(row, self.COURSE_LISTING)
            if isinstance(listing, str) and "course listing" in listing.lower():
                continue
            if all(is_blank(value) for value in row.values()):
                continue
            data_rows.append(row)
        return data_rows

    def parse(self, rows: Iterable[Mapping[str, Any]]) -> ParseResult:
        """Parse all rows of a spreadsheet.

        A row that fails to parse is recorded in the result's errors and
        does not stop the remaining rows.

        Args:
            rows: Rows as mappings of column name to cell value.

        Returns:
            ParseResult with the events found and per-row error messages.
        """
        rows = list(rows)
        if not rows:
            return ParseResult(errors=["No data found in the spreadsheet"])

        result = ParseResult()
        for index, row in enumerate(self.filter_data_rows(rows), start=1):
            try:
                result.events.extend(self.parse_row(row))
            except Exception as e:
                LOG.warning("Row %d could not be parsed: %s", index, e)
                result.errors.append(f"Error parsing row {index}: {e}")
        return result
