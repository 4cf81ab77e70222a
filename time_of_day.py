"""
Parse a freestanding time phrase such as "2pm", "2:30 PM" or "14:30".

Descriptive words ("morning", "afternoon") are not understood; callers must
convert them to a numeric or am/pm form first.
"""
import re
from typing import NamedTuple

from errors import TimePhraseUnresolvedError

_TIME_12H_RE = re.compile(r"(\d{1,2})(?::(\d{2}))?(?::(\d{2}))?\s*(am|pm)", re.IGNORECASE)
_TIME_24H_RE = re.compile(r"(\d{1,2})(?::(\d{2}))?(?::(\d{2}))?")


class TimeOfDay(NamedTuple):
    hour: int
    minute: int
    second: int = 0


def _to_24h(hour: int, meridiem: str) -> int:
    meridiem = meridiem.lower()
    if meridiem == "pm" and hour != 12:
        return hour + 12
    if meridiem == "am" and hour == 12:
        return 0
    return hour


def parse_time_of_day(phrase: str) -> TimeOfDay:
    """
    Return the hour/minute/second expressed by ``phrase``.

    12-hour forms are tried first, then bare 24-hour digits. Values are not
    range-checked here; an impossible hour surfaces when the final instant
    is built.

    Raises:
        TimePhraseUnresolvedError: neither pattern matched.
    """
    match = _TIME_12H_RE.search(phrase)
    if match:
        hour, minute, second, meridiem = match.groups()
        return TimeOfDay(_to_24h(int(hour), meridiem), int(minute or 0), int(second or 0))

    match = _TIME_24H_RE.search(phrase)
    if match:
        hour, minute, second = match.groups()
        return TimeOfDay(int(hour), int(minute or 0), int(second or 0))

    raise TimePhraseUnresolvedError(phrase)
