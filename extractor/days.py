"""Mapping of free-text weekday tokens to iCalendar day codes."""

import re
from typing import Any

# Index matches date.weekday(): Monday is 0.
DAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

DAY_TOKENS = {
    "m": "MO", "mo": "MO", "mon": "MO", "monday": "MO",
    "t": "TU", "tu": "TU", "tue": "TU", "tues": "TU", "tuesday": "TU",
    "w": "WE", "we": "WE", "wed": "WE", "wednesday": "WE",
    "th": "TH", "thu": "TH", "thur": "TH", "thurs": "TH", "thursday": "TH", "r": "TH",
    "f": "FR", "fr": "FR", "fri": "FR", "friday": "FR",
    "s": "SA", "sa": "SA", "sat": "SA", "saturday": "SA",
    "su": "SU", "sun": "SU", "sunday": "SU",
}

# Longest keys first so "su" wins over "s" and "thu" over "t".
_KEYS_BY_LENGTH = sorted(DAY_TOKENS, key=len, reverse=True)


def _match_token(token: str) -> str:
    # Single letters only match exactly; "sep" is not Saturday.
    for key in _KEYS_BY_LENGTH:
        if token == key or (len(key) > 1 and token.startswith(key)):
            return DAY_TOKENS[key]
    return ""


def parse_days(text: Any) -> list[str]:
    """Parse a day string such as "Mon, Wed" into day codes.

    Args:
        text: Day names or abbreviations separated by spaces, commas or pipes.

    Returns:
        Day codes in first-seen order without duplicates. Tokens that
        are not weekdays are skipped.
    """
    if text is None or text == "":
        return []

    text = re.sub(r"\([^)]*\)", " ", str(text))
    normalized = re.sub(r"[,|]", " ", text.lower()).replace(".", "")

    days: list[str] = []
    for token in normalized.split():
        code = _match_token(token)
        if code and code not in days:
            days.append(code)
    return days
