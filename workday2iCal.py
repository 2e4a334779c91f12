#!/usr/bin/env python3
"""Workday schedule to iCalendar converter.

ETL pipeline that reads a Workday "View My Courses" export (.xlsx, .xls or .csv)
and generates an iCalendar (.ics) file with one weekly recurring event per
meeting pattern.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from extractor import MeetingEvent, ScheduleParser, SpreadsheetError, load_rows
from extractor.normalize import format_time
from transformer import ICalTransformer


def default_output_path(input_path: str) -> str:
    """Derive the output file name from the input, e.g. schedule.xlsx -> schedule.ics."""
    return str(Path(input_path).with_suffix(".ics"))


def print_preview(events: list[MeetingEvent]) -> None:
    """Print a table of parsed events, flagging the incomplete ones."""
    for event in events:
        days = ", ".join(event.days) if event.days else "?"
        if event.start_time and event.end_time:
            times = f"{format_time(event.start_time)} - {format_time(event.end_time)}"
        else:
            times = "Time?"
        print(
            f"  {event.course_code:<12} {event.section:<8} {event.format:<14} "
            f"{days:<16} {times:<22} {event.location or '-'}"
        )
        if not event.is_valid:
            print(f"    Parsing incomplete. Raw data: {event.raw!r}")


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the ETL pipeline."""
    parser = argparse.ArgumentParser(
        description="Convert a Workday schedule export to iCalendar format.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 workday2iCal.py View_My_Courses.xlsx
  python3 workday2iCal.py View_My_Courses.xlsx --default-year 2025 --preview -o fall.ics
        """
    )

    parser.add_argument(
        "input",
        help="Workday schedule export (.xlsx, .xls or .csv)"
    )

    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file path (default: input file name with .ics extension)"
    )

    parser.add_argument(
        "--default-year",
        type=int,
        default=None,
        help="Year assumed for dates written without one, e.g. 'Sep 3' (default: current year)"
    )

    parser.add_argument(
        "--calendar-name",
        default=ICalTransformer.CALENDAR_NAME,
        help=f"Calendar display name (default: {ICalTransformer.CALENDAR_NAME})"
    )

    parser.add_argument(
        "-p", "--preview",
        action="store_true",
        help="Print the parsed events before writing the calendar"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Ensure output file has .ics extension
    output_path = args.output or default_output_path(args.input)
    if not output_path.lower().endswith(".ics"):
        output_path = f"{output_path}.ics"

    print(f"Reading schedule from: {args.input}")

    try:
        rows = load_rows(args.input)

        result = ScheduleParser(default_year=args.default_year).parse(rows)

        for error in result.errors:
            print(f"Warning: {error}", file=sys.stderr)

        if not result.events:
            message = result.errors[0] if result.errors else (
                "No course events found in the file. Make sure it's a Workday schedule export."
            )
            print(f"Error: {message}", file=sys.stderr)
            sys.exit(1)

        valid_events = result.valid_events
        print(f"Found {len(result.events)} meeting events, {len(valid_events)} complete.")

        if args.preview:
            print_preview(result.events)

        if not valid_events:
            print("Error: No valid events were found to add to your calendar.", file=sys.stderr)
            sys.exit(1)

        if len(valid_events) < len(result.events):
            print(
                f"Warning: {len(result.events) - len(valid_events)} event(s) could not be "
                "fully parsed and were left out. Use --preview to see their raw data."
            )

        transformer = ICalTransformer(calendar_name=args.calendar_name)
        calendar = transformer.transform(valid_events)
        encoded = len(calendar.walk("VEVENT"))
        if encoded < len(valid_events):
            print(f"Warning: {len(valid_events) - encoded} event(s) have no start date and were left out.")

        transformer.save(output_path)

        print(f"Schedule saved to: {output_path} ({encoded} recurring events)")

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)
    except SpreadsheetError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
