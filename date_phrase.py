"""
Natural-language date phrase parsing.

The resolver only relies on the :class:`DatePhraseParser` protocol: given a
phrase and a reference instant, return candidate calendar fields, each with a
flag saying whether the phrase stated it or it was filled in from the
reference. :class:`DateparserPhraseParser` is the default implementation,
backed by the ``dateparser`` library.

Known unreliable phrases
------------------------
These are passed to the parser as-is and their results are NOT corrected.
Callers should rewrite them before calling the resolver:

- a relative month with a day of month ("15th of next month",
  "next month 15th") often lands on the wrong day; send "september 15th";
- first/last-day-of-month and business phrases ("last day of month",
  "first monday of next month", "next business day", "end of week")
  resolve incorrectly or not at all; send an absolute date or a weekday;
- holidays and seasons ("christmas", "spring") are not recognised; send
  the calendar date.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Mapping, Optional, Protocol
from zoneinfo import ZoneInfo

import dateparser
from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

import config
from errors import TimePhraseUnresolvedError
from time_of_day import parse_time_of_day

logger = logging.getLogger(__name__)

DATE_FIELDS = ("year", "month", "day")
TIME_FIELDS = ("hour", "minute", "second")
FIELDS = DATE_FIELDS + TIME_FIELDS

# Phrases answered directly from the reference instant: days offset, and
# whether the reference time of day is part of the answer.
_CASUAL_ANCHORS = {
    "now": (0, True),
    "today": (0, False),
    "tonight": (0, False),
    "tomorrow": (1, False),
    "yesterday": (-1, False),
}

WEEKDAYS = {
    "monday": MO,
    "tuesday": TU,
    "wednesday": WE,
    "thursday": TH,
    "friday": FR,
    "saturday": SA,
    "sunday": SU,
}

_TIME_SUFFIX = r"(?:\s+at\s+(?P<time>.+))?"
_ANCHOR_RE = re.compile(r"^(?P<anchor>" + "|".join(_CASUAL_ANCHORS) + r")" + _TIME_SUFFIX + "$")
_WEEKDAY_RE = re.compile(
    r"^(?:(?P<modifier>next week|next|this|last)\s+)?"
    r"(?P<weekday>" + "|".join(WEEKDAYS) + r")"
    r"(?:\s+(?P<suffix>next week))?" + _TIME_SUFFIX + "$"
)

# Alternative reference bases used to tell stated fields from inferred ones.
_BASE_SHIFTS = (
    relativedelta(days=1),
    relativedelta(years=1, months=1, days=1, hours=1, minutes=1, seconds=1),
)


@dataclass(frozen=True)
class ParsedComponents:
    """Calendar fields for one candidate reading of a date phrase."""

    values: Mapping[str, int] = field(default_factory=dict)
    certain: frozenset = frozenset()

    def get(self, name: str) -> Optional[int]:
        return self.values.get(name)

    def is_certain(self, name: str) -> bool:
        return name in self.certain

    @classmethod
    def from_datetime(cls, dt: datetime, certain=()) -> "ParsedComponents":
        return cls(
            values={name: getattr(dt, name) for name in FIELDS},
            certain=frozenset(certain),
        )


class DatePhraseParser(Protocol):
    def parse(self, phrase: str, reference: datetime) -> list[ParsedComponents]:
        """Return candidate readings of ``phrase``; an empty list means no match."""
        ...


class DateparserPhraseParser:
    """
    :class:`DatePhraseParser` backed by ``dateparser``.

    dateparser only returns a datetime, so certainty is recovered by re-parsing:
    the phrase is parsed again against shifted reference bases.

    - A field whose value is the same for every base was stated explicitly.
    - If no date field was stated but the phrase moves the date away from
      its base ("in 2 weeks", "next month"), the whole date counts as
      stated.
    - If the result sits at the same sub-day distance from every base
      ("in 2 hours", "in 30 minutes"), the phrase names an exact instant and
      every field counts as stated.
    - Otherwise ("2pm") the date is inferred from the reference and every
      date field is uncertain.

    Casual anchors ("tomorrow") and weekday phrases ("friday", "next monday",
    "next week monday", "last friday"), each optionally followed by
    "at <time>", are resolved from the reference with ``relativedelta``
    before dateparser is consulted. dateparser finds nothing in "next
    monday" and reads a bare weekday as the previous one.
    """

    def __init__(self, prefer_dates_from: str = config.PREFER_DATES_FROM, languages=("en",)) -> None:
        self.prefer_dates_from = prefer_dates_from
        self.languages = list(languages)

    def parse(self, phrase: str, reference: datetime) -> list[ParsedComponents]:
        key = " ".join(phrase.lower().split())
        known = self._pre_parse(key, reference)
        if known is not None:
            logger.debug("Resolved %r from the reference as %s", phrase, dict(known.values))
            return [known]

        zone_key = getattr(reference.tzinfo, "key", None)
        base = reference.replace(tzinfo=None, microsecond=0)
        parsed = self._parse_at(phrase, base, zone_key)
        if parsed is None:
            logger.debug("dateparser found no date in %r", phrase)
            return []

        readings = [(base, parsed)]
        for shift in _BASE_SHIFTS:
            shifted_base = base + shift
            reading = self._parse_at(phrase, shifted_base, zone_key)
            if reading is not None:
                readings.append((shifted_base, reading))

        certain = self._certain_fields(readings)
        logger.debug("Parsed %r as %s (certain: %s)", phrase, parsed.isoformat(), sorted(certain))
        return [ParsedComponents.from_datetime(parsed, certain)]

    def _parse_at(self, phrase: str, base: datetime, zone_key: Optional[str]) -> Optional[datetime]:
        settings = {
            "RELATIVE_BASE": base,
            "PREFER_DATES_FROM": self.prefer_dates_from,
            "RETURN_AS_TIMEZONE_AWARE": False,
        }
        if zone_key:
            settings["TIMEZONE"] = zone_key
            settings["TO_TIMEZONE"] = zone_key
        result = dateparser.parse(phrase, languages=self.languages, settings=settings)
        if result is not None and result.tzinfo is not None:
            # Phrase carried its own zone ("2pm EST"); express it as wall-clock
            # time in the reference zone.
            if zone_key:
                result = result.astimezone(ZoneInfo(zone_key))
            result = result.replace(tzinfo=None)
        return result

    @staticmethod
    def _certain_fields(readings: list[tuple[datetime, datetime]]) -> set[str]:
        parsed = readings[0][1]
        offsets = {result - base for base, result in readings}
        if len(readings) > 1 and len(offsets) == 1 and offsets.pop() % timedelta(days=1):
            return set(FIELDS)
        invariant = {
            name for name in FIELDS
            if all(getattr(result, name) == getattr(parsed, name) for _, result in readings)
        }
        stated_date = invariant & set(DATE_FIELDS)
        if not stated_date and any(result.date() != base.date() for base, result in readings):
            stated_date = set(DATE_FIELDS)
        return stated_date | (invariant & set(TIME_FIELDS))

    @classmethod
    def _pre_parse(cls, key: str, reference: datetime) -> Optional[ParsedComponents]:
        match = _ANCHOR_RE.match(key)
        if match:
            days, with_time = _CASUAL_ANCHORS[match.group("anchor")]
            day = reference + timedelta(days=days)
            certain = FIELDS if with_time else DATE_FIELDS
        else:
            match = _WEEKDAY_RE.match(key)
            if not match:
                return None
            day = cls._weekday(reference, match.group("weekday"), match.group("modifier"), match.group("suffix"))
            certain = DATE_FIELDS

        if match.group("time"):
            try:
                time_of_day = parse_time_of_day(match.group("time"))
                day = day.replace(hour=time_of_day.hour, minute=time_of_day.minute, second=time_of_day.second)
            except (TimePhraseUnresolvedError, ValueError):
                return None
            certain = FIELDS
        return ParsedComponents.from_datetime(day, certain)

    @staticmethod
    def _weekday(reference: datetime, name: str, modifier: Optional[str], suffix: Optional[str]) -> datetime:
        weekday = WEEKDAYS[name]
        if modifier == "next week" or suffix:
            week_start = reference + relativedelta(weeks=1, weekday=MO(-1))
            return week_start + relativedelta(weekday=weekday)
        if modifier == "this":
            return reference + relativedelta(weekday=MO(-1)) + relativedelta(weekday=weekday)
        if modifier == "next":
            return reference + relativedelta(days=1, weekday=weekday)
        if modifier == "last":
            return reference + relativedelta(days=-1, weekday=weekday(-1))
        # A bare weekday is today or the next one.
        return reference + relativedelta(weekday=weekday)
