"""Data models for meeting patterns and course events."""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Optional

from .days import DAY_CODES


class PatternStatus(Enum):
    """How much of a meeting pattern could be recovered from its source text."""

    PARSED = "parsed"
    PARTIAL = "partial"
    EMPTY = "empty"


@dataclass
class MeetingPattern:
    """One recurring weekly time slot extracted from a schedule cell."""

    days: list[str] = field(default_factory=list)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: str = ""
    raw: str = ""
    status: PatternStatus = PatternStatus.PARSED

    def __post_init__(self) -> None:
        unknown = [day for day in self.days if day not in DAY_CODES]
        if unknown:
            raise ValueError(f"Unknown day codes: {', '.join(unknown)}")
        if len(set(self.days)) != len(self.days):
            raise ValueError("Day codes must not repeat")

    @property
    def is_valid(self) -> bool:
        return bool(self.days) and self.start_time is not None and self.end_time is not None

    @property
    def low_confidence(self) -> bool:
        return self.status is not PatternStatus.PARSED

    def has_any_field(self) -> bool:
        """Return True if at least one schedule field was recovered."""
        return bool(
            self.days
            or self.start_time
            or self.end_time
            or self.start_date
            or self.end_date
            or self.location
        )


@dataclass(frozen=True)
class CourseInfo:
    """Course code and title split out of a course listing."""

    code: str
    title: str


@dataclass
class MeetingEvent:
    """A meeting pattern merged with the course metadata of its row."""

    course_code: str
    course_title: str = ""
    section: str = ""
    format: str = ""
    delivery_mode: str = ""
    instructor: str = ""
    days: list[str] = field(default_factory=list)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: str = ""
    raw: str = ""

    @property
    def is_valid(self) -> bool:
        return bool(self.days) and self.start_time is not None and self.end_time is not None


@dataclass
class ParseResult:
    """Outcome of parsing a whole spreadsheet."""

    events: list[MeetingEvent] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def valid_events(self) -> list[MeetingEvent]:
        return [event for event in self.events if event.is_valid]
