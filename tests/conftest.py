"""Shared fixtures: a scripted date phrase parser and a fixed clock."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from dateutil.relativedelta import relativedelta

from date_phrase import DATE_FIELDS, FIELDS, TIME_FIELDS, ParsedComponents


def _time_only(hour, minute=0):
    def reading(ref):
        return ParsedComponents.from_datetime(
            ref.replace(hour=hour, minute=minute, second=0, microsecond=0), TIME_FIELDS
        )
    return reading


def _days_from_reference(days):
    def reading(ref):
        return ParsedComponents.from_datetime(ref + timedelta(days=days), DATE_FIELDS)
    return reading


def _next_week_monday(ref):
    return ParsedComponents.from_datetime(ref + timedelta(days=7 - ref.weekday()), DATE_FIELDS)


def _month_day(month, day):
    def reading(ref):
        values = {"year": ref.year, "month": month, "day": day, "hour": 0, "minute": 0, "second": 0}
        certain = {"month", "day"}
        return ParsedComponents(values=values, certain=frozenset(certain))
    return reading


def _friday_at_3pm(ref):
    friday = ref + timedelta(days=(4 - ref.weekday()) % 7 or 7)
    return ParsedComponents.from_datetime(
        friday.replace(hour=15, minute=0, second=0, microsecond=0), FIELDS
    )


def _relative_month_wrong_day(ref):
    # Reproduces the known quirk: "15th of next month" keeps the reference day.
    return ParsedComponents.from_datetime(ref + relativedelta(months=1), DATE_FIELDS)


READINGS = {
    "2pm": _time_only(14),
    "3pm": _time_only(15),
    "today": _days_from_reference(0),
    "tomorrow": _days_from_reference(1),
    "next week monday": _next_week_monday,
    "september 15th": _month_day(9, 15),
    "february 30th": _month_day(2, 30),
    "friday at 3pm": _friday_at_3pm,
    "15th of next month": _relative_month_wrong_day,
}


class FakeDateParser:
    """DatePhraseParser returning scripted readings; unknown phrases do not match."""

    def __init__(self, readings=None):
        self.readings = dict(READINGS if readings is None else readings)
        self.calls = []

    def parse(self, phrase, reference):
        self.calls.append((phrase, reference))
        reading = self.readings.get(phrase.strip().lower())
        if reading is None:
            return []
        return [reading(reference)]


class ExplodingDateParser:
    def parse(self, phrase, reference):
        raise RuntimeError("boom")


@pytest.fixture
def fake_parser():
    return FakeDateParser()


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2024-01-15 16:00 UTC (10:00 in Chicago)."""
    instant = datetime(2024, 1, 15, 16, 0, 0, tzinfo=timezone.utc)

    def clock(tz):
        return instant.astimezone(tz)

    return clock


@pytest.fixture
def exploding_parser():
    return ExplodingDateParser()
