"""Extractor module for reading meeting events out of Workday schedule exports."""

from .models import MeetingEvent, MeetingPattern, ParseResult, PatternStatus
from .parser import ScheduleParser
from .spreadsheet import SpreadsheetError, load_rows

__all__ = [
    "MeetingEvent",
    "MeetingPattern",
    "ParseResult",
    "PatternStatus",
    "ScheduleParser",
    "SpreadsheetError",
    "load_rows",
]
