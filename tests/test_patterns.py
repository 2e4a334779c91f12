from datetime import date, time
from unittest import TestCase

from extractor.models import PatternStatus
from extractor.patterns import (
    parse_date_range,
    parse_meeting_patterns,
    parse_single_pattern,
    parse_time_range,
    split_pattern_blocks,
)


class ParseSinglePatternTests(TestCase):
    def test_strict_pipe_format(self):
        pattern = parse_single_pattern("Mon Wed | 10:00 - 11:00 | 2024-09-03 - 2024-12-05 | Room 200")
        self.assertEqual(pattern.days, ["MO", "WE"])
        self.assertEqual(pattern.start_time, time(10, 0))
        self.assertEqual(pattern.end_time, time(11, 0))
        self.assertEqual(pattern.start_date, date(2024, 9, 3))
        self.assertEqual(pattern.end_date, date(2024, 12, 5))
        self.assertEqual(pattern.location, "Room 200")
        self.assertIs(pattern.status, PatternStatus.PARSED)
        self.assertFalse(pattern.low_confidence)

    def test_strict_keeps_pipes_inside_location(self):
        pattern = parse_single_pattern("Mon | 9:00 - 10:00 | 2024-09-03 - 2024-12-05 | Building A | Room 5")
        self.assertEqual(pattern.location, "Building A | Room 5")

    def test_workday_dates_first_layout_falls_back_to_fuzzy(self):
        pattern = parse_single_pattern(
            "2025-09-05 - 2025-11-28 | Fri (Alternate weeks) | 4:00 p.m. - 6:00 p.m. | ESB-Floor 1-Room 1013"
        )
        self.assertEqual(pattern.days, ["FR"])
        self.assertEqual(pattern.start_time, time(16, 0))
        self.assertEqual(pattern.end_time, time(18, 0))
        self.assertEqual(pattern.start_date, date(2025, 9, 5))
        self.assertEqual(pattern.end_date, date(2025, 11, 28))
        self.assertEqual(pattern.location, "ESB-Floor 1-Room 1013")
        self.assertIs(pattern.status, PatternStatus.PARSED)

    def test_fuzzy_free_text(self):
        pattern = parse_single_pattern("Tue Thu 9:30 AM - 11:00 AM Sep 3, 2024 to Dec 5, 2024 DMP 310")
        self.assertEqual(pattern.days, ["TU", "TH"])
        self.assertEqual(pattern.start_time, time(9, 30))
        self.assertEqual(pattern.end_time, time(11, 0))
        self.assertEqual(pattern.start_date, date(2024, 9, 3))
        self.assertEqual(pattern.end_date, date(2024, 12, 5))
        self.assertEqual(pattern.location, "DMP 310")

    def test_fuzzy_does_not_read_iso_dates_as_times(self):
        pattern = parse_single_pattern("2024-09-03 - 2024-12-05 Mon 10:00 - 11:00")
        self.assertEqual(pattern.start_time, time(10, 0))
        self.assertEqual(pattern.end_time, time(11, 0))

    def test_single_date_is_not_read_as_time(self):
        pattern = parse_single_pattern("2024-09-03 | Tue | 10:00 a.m. - 11:00 a.m. | LSK 200")
        self.assertEqual(pattern.days, ["TU"])
        self.assertEqual(pattern.start_time, time(10, 0))
        self.assertEqual(pattern.end_time, time(11, 0))
        self.assertEqual(pattern.start_date, date(2024, 9, 3))
        self.assertIsNone(pattern.end_date)
        self.assertEqual(pattern.location, "LSK 200")

    def test_textual_dates_use_default_year(self):
        pattern = parse_single_pattern("Mon | 10:00 - 11:00 | Sep 3 - Dec 5", default_year=2030)
        self.assertEqual(pattern.start_date, date(2030, 9, 3))
        self.assertEqual(pattern.end_date, date(2030, 12, 5))

    def test_partial_pattern_is_flagged(self):
        pattern = parse_single_pattern("Sep 3, 2024 - Dec 5, 2024")
        self.assertEqual(pattern.days, [])
        self.assertIsNone(pattern.start_time)
        self.assertEqual(pattern.start_date, date(2024, 9, 3))
        self.assertIs(pattern.status, PatternStatus.PARTIAL)
        self.assertTrue(pattern.low_confidence)

    def test_unrecognizable_block_returns_none(self):
        self.assertIsNone(parse_single_pattern("Contact department for schedule"))


class RangeTests(TestCase):
    def test_time_range(self):
        self.assertEqual(parse_time_range("14:00-15:30"), (time(14, 0), time(15, 30)))
        self.assertEqual(parse_time_range("10 - 11"), (time(10, 0), time(11, 0)))
        self.assertEqual(parse_time_range("1:00 PM to 2:30 PM"), (time(13, 0), time(14, 30)))
        self.assertEqual(parse_time_range("TBA"), (None, None))

    def test_date_range(self):
        self.assertEqual(
            parse_date_range("2024-09-03 – 2024-12-05"),
            (date(2024, 9, 3), date(2024, 12, 5)),
        )
        self.assertEqual(parse_date_range("no dates"), (None, None))


class SplitPatternBlocksTests(TestCase):
    def test_blank_lines_separate_blocks(self):
        text = "Mon Wed | 10:00 - 11:00\n\nFri | 13:00 - 14:00"
        self.assertEqual(split_pattern_blocks(text), ["Mon Wed | 10:00 - 11:00", "Fri | 13:00 - 14:00"])

    def test_double_br_tags_separate_blocks(self):
        text = "Mon | 10:00 - 11:00<br><br>Wed&nbsp;| 14:00 - 15:00"
        self.assertEqual(split_pattern_blocks(text), ["Mon | 10:00 - 11:00", "Wed | 14:00 - 15:00"])

    def test_one_pattern_per_pipe_line(self):
        text = (
            "2024-09-03 - 2024-12-05 | Mon Wed | 10:00 a.m. - 11:00 a.m. | LSK 200\n"
            "2024-09-06 - 2024-12-06 | Fri | 1:00 p.m. - 2:00 p.m. | DMP 110"
        )
        self.assertEqual(len(split_pattern_blocks(text)), 2)

    def test_single_line_breaks_are_joined(self):
        text = "Mon Wed | 10:00 - 11:00\nRoom 200"
        self.assertEqual(split_pattern_blocks(text), ["Mon Wed | 10:00 - 11:00 Room 200"])

    def test_empty(self):
        self.assertEqual(split_pattern_blocks(""), [])
        self.assertEqual(split_pattern_blocks("   "), [])


class ParseMeetingPatternsTests(TestCase):
    def test_malformed_block_is_kept_as_empty_pattern(self):
        patterns = parse_meeting_patterns("Contact department for schedule")
        self.assertEqual(len(patterns), 1)
        self.assertIs(patterns[0].status, PatternStatus.EMPTY)
        self.assertTrue(patterns[0].low_confidence)
        self.assertEqual(patterns[0].days, [])
        self.assertIsNone(patterns[0].start_time)
        self.assertIsNone(patterns[0].end_time)
        self.assertEqual(patterns[0].raw, "Contact department for schedule")

    def test_multiple_patterns(self):
        patterns = parse_meeting_patterns("Mon Wed | 10:00 - 11:00\n\nFri | 13:00 - 14:00")
        self.assertEqual([p.days for p in patterns], [["MO", "WE"], ["FR"]])
        self.assertEqual(patterns[1].raw, "Fri | 13:00 - 14:00")
