"""iCalendar transformer for meeting events."""

import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from icalendar import Calendar, Event, Timezone, TimezoneDaylight, TimezoneStandard, vRecur

from extractor.days import DAY_CODES
from extractor.models import MeetingEvent
from .base import BaseTransformer

LOG = logging.getLogger(__name__)

UNTIL_TIME = time(23, 59, 59)


def find_first_occurrence(start_date: date, days: list[str]) -> date:
    """Find the first date on or after start_date that falls on one of days.

    Args:
        start_date: The earliest possible date.
        days: Day codes such as ["MO", "WE"].

    Returns:
        Date of the first occurrence, or start_date if no day matches
        within a week.
    """
    targets = {DAY_CODES.index(day) for day in days if day in DAY_CODES}
    for offset in range(7):
        candidate = start_date + timedelta(days=offset)
        if candidate.weekday() in targets:
            return candidate
    return start_date


def simple_hash(text: str) -> str:
    """Return a 32-bit rolling hash of text as hex (h = h * 31 + c)."""
    value = 0
    for char in text:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return format(abs(value), "x")


class ICalTransformer(BaseTransformer):
    """Transformer that converts meeting events to weekly recurring iCalendar events."""

    TIMEZONE = ZoneInfo("America/Vancouver")
    TZID = "America/Vancouver"
    PRODID = "-//UBC Workday to Calendar//EN"
    CALENDAR_NAME = "UBC Class Schedule"
    UID_DOMAIN = "ubc-workday-calendar"

    # (component, name, offset from, offset to, first transition, month, day rule)
    TRANSITIONS = (
        (TimezoneDaylight, "PDT", -8, -7, datetime(1970, 3, 8, 2, 0, 0), 3, "2SU"),
        (TimezoneStandard, "PST", -7, -8, datetime(1970, 11, 1, 2, 0, 0), 11, "1SU"),
    )

    def __init__(
        self,
        calendar_name: Optional[str] = None,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize the iCalendar transformer.

        Args:
            calendar_name: Display name of the calendar (X-WR-CALNAME).
            now: Clock used for DTSTAMP. Defaults to the current UTC time.
        """
        self._calendar: Optional[Calendar] = None
        self._calendar_name = calendar_name or self.CALENDAR_NAME
        self._now = now or (lambda: datetime.now(timezone.utc))

    def _generate_uid(self, event: MeetingEvent) -> str:
        """Generate a stable identifier for an event.

        Identical course, section, days and start time give the same UID.
        """
        start = event.start_time
        unique_string = (
            f"{event.course_code}-{event.section}-{''.join(event.days)}-"
            f"{start.hour if start else ''}{start.minute if start else ''}"
        )
        return f"{simple_hash(unique_string)}@{self.UID_DOMAIN}"

    @staticmethod
    def _summary(event: MeetingEvent) -> str:
        summary = event.course_code
        if event.section:
            summary += f" ({event.section})"
        if event.format:
            summary += f" - {event.format}"
        return summary

    @staticmethod
    def _description(event: MeetingEvent) -> str:
        parts = []
        if event.course_title:
            parts.append(event.course_title)
        if event.instructor:
            parts.append(f"Instructor: {event.instructor}")
        if event.delivery_mode:
            parts.append(f"Mode: {event.delivery_mode}")
        return "\n".join(parts)

    def build_timezone(self) -> Timezone:
        """Build the VTIMEZONE component for the calendar's fixed timezone."""
        vtimezone = Timezone()
        vtimezone.add("tzid", self.TZID)
        for component_class, name, offset_from, offset_to, start, month, byday in self.TRANSITIONS:
            transition = component_class()
            transition.add("tzoffsetfrom", timedelta(hours=offset_from))
            transition.add("tzoffsetto", timedelta(hours=offset_to))
            transition.add("tzname", name)
            transition.add("dtstart", start)
            transition.add("rrule", vRecur({"freq": "yearly", "bymonth": month, "byday": byday}))
            vtimezone.add_component(transition)
        return vtimezone

    def build_event(self, event: MeetingEvent) -> Optional[Event]:
        """Build a weekly recurring VEVENT for a meeting event.

        Args:
            event: The meeting event.

        Returns:
            The iCalendar event, or None if the start date, either time
            or the days are missing.
        """
        if not event.start_date or not event.start_time or not event.end_time or not event.days:
            LOG.debug("Skipping %s (%s): incomplete schedule", event.course_code, event.section)
            return None

        first_date = find_first_occurrence(event.start_date, event.days)

        start_datetime = datetime.combine(first_date, event.start_time, tzinfo=self.TIMEZONE)
        end_datetime = datetime.combine(first_date, event.end_time, tzinfo=self.TIMEZONE)

        ical_event = Event()
        ical_event.add("uid", self._generate_uid(event))
        ical_event.add("dtstamp", self._now())
        ical_event.add("dtstart", start_datetime)
        ical_event.add("dtend", end_datetime)

        # UNTIL is the last day at 23:59:59 UTC, not the class end time.
        recurrence = {"freq": "weekly", "byday": list(event.days)}
        if event.end_date:
            recurrence["until"] = datetime.combine(event.end_date, UNTIL_TIME, tzinfo=timezone.utc)
        ical_event.add("rrule", vRecur(recurrence))

        ical_event.add("summary", self._summary(event))

        if event.location:
            ical_event.add("location", event.location)

        description = self._description(event)
        if description:
            ical_event.add("description", description)

        return ical_event

    def generate_event(self, event: MeetingEvent) -> Optional[str]:
        """Serialize a single meeting event as VEVENT text, or None if it cannot be encoded."""
        ical_event = self.build_event(event)
        if ical_event is None:
            return None
        return ical_event.to_ical().decode("utf-8")

    def transform(self, events: list[MeetingEvent]) -> Calendar:
        """Transform meeting events into iCalendar format.

        Args:
            events: List of meeting events to transform.

        Returns:
            iCalendar Calendar object.
        """
        self._calendar = Calendar()
        self._calendar.add("version", "2.0")
        self._calendar.add("prodid", self.PRODID)
        self._calendar.add("calscale", "GREGORIAN")
        self._calendar.add("method", "PUBLISH")
        self._calendar.add("x-wr-calname", self._calendar_name)
        self._calendar.add("x-wr-timezone", self.TZID)
        self._calendar.add_component(self.build_timezone())

        for event in events:
            ical_event = self.build_event(event)
            if ical_event is not None:
                self._calendar.add_component(ical_event)

        return self._calendar

    def generate(self, events: list[MeetingEvent]) -> str:
        """Transform meeting events and return the calendar as text."""
        return self.transform(events).to_ical().decode("utf-8")

    def save(self, output_path: str) -> None:
        """Write the last transformed calendar to output_path.

        Raises:
            RuntimeError: If no calendar has been built yet.
        """
        if self._calendar is None:
            raise RuntimeError("No calendar data. Call transform() first.")

        with open(output_path, "wb") as f:
            f.write(self._calendar.to_ical())
