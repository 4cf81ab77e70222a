"""
Resolve a natural-language date plus a time of day into one absolute instant.

Two entry points are provided, each with its own consistent policy:

resolve_human_datetime
    Strict. Separate date and time phrases, a mandatory IANA timezone and a
    mandatory client-supplied reference instant. Every failure is raised.

resolve_text
    Best-effort. A single combined phrase; the timezone falls back to a
    default, the reference instant falls back to the clock, and a phrase
    that cannot be parsed resolves to the reference instant itself.

In both, a phrase that only carries a time ("2pm") and lands before the
reference instant is moved to the next day.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import config
from date_phrase import DATE_FIELDS, TIME_FIELDS, DateparserPhraseParser, DatePhraseParser, ParsedComponents
from errors import DatePhraseUnresolvedError, InputValidationError, InvalidResolvedInstantError
from time_of_day import TimeOfDay, parse_time_of_day
from timezone_utils import (
    Clock,
    format_instant,
    normalize,
    parse_reference_instant,
    require_zone,
    resolve_reference_instant,
    resolve_zone,
    system_clock,
)

logger = logging.getLogger(__name__)

_FIELD_HINTS = {
    "humanDate": "Please provide a natural language date request (e.g., 'next week monday')",
    "humanTime": "Please provide a time (e.g., '2pm', '14:30')",
    "timeZone": "Please provide a valid IANA timezone (e.g., 'America/Chicago', 'Europe/London')",
    "clientCurrentTime": (
        "Please provide the client's current time in ISO format (e.g., '2024-01-15T10:00:00Z')"
    ),
    "text": "Please provide a natural language date (e.g., 'next monday at 2pm')",
}


@dataclass(frozen=True)
class ResolvedDate:
    instant: datetime
    time_zone: str
    human_date: str
    human_time: str
    client_current_time: str

    @property
    def converted_date(self) -> str:
        return format_instant(self.instant)

    def to_dict(self) -> dict:
        return {
            "convertedDate": self.converted_date,
            "timeZone": self.time_zone,
            "humanDate": self.human_date,
            "humanTime": self.human_time,
            "clientCurrentTime": self.client_current_time,
        }


@dataclass(frozen=True)
class ResolvedText:
    instant: datetime
    time_zone: str
    original_text: str
    message: Optional[str] = None

    @property
    def converted_date(self) -> str:
        return format_instant(self.instant)

    def to_dict(self) -> dict:
        data = {
            "convertedDate": self.converted_date,
            "timeZone": self.time_zone,
            "originalText": self.original_text,
        }
        if self.message:
            data["message"] = self.message
        return data


def _require_text(field: str, value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InputValidationError(field, _FIELD_HINTS[field])
    return value


# ---------------------------------------------------------------------------
# Field combination
# ---------------------------------------------------------------------------


def only_time_specified(components: ParsedComponents) -> bool:
    """
    True when the phrase carried no date at all.

    Day, month and year must all be uncertain; hour/minute certainty is
    deliberately ignored.
    """
    return not any(components.is_certain(name) for name in DATE_FIELDS)


def _time_from_components(components: ParsedComponents) -> TimeOfDay:
    return TimeOfDay(*(
        components.get(name) if components.is_certain(name) else 0
        for name in TIME_FIELDS
    ))


def combine_fields(components: ParsedComponents, tz: ZoneInfo, time_of_day: Optional[TimeOfDay] = None) -> datetime:
    """
    Build an aware datetime from the candidate's date and the given time.

    Without an explicit ``time_of_day`` the candidate's own time fields are
    used where certain, zero otherwise.

    Raises:
        InvalidResolvedInstantError: the fields do not form a real instant.
    """
    if time_of_day is None:
        time_of_day = _time_from_components(components)
    try:
        local = datetime(
            components.get("year"),
            components.get("month"),
            components.get("day"),
            time_of_day.hour,
            time_of_day.minute,
            time_of_day.second,
            tzinfo=tz,
        )
        return normalize(local, tz)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidResolvedInstantError(str(exc)) from exc


def roll_forward(instant: datetime, reference: datetime, time_only: bool) -> datetime:
    """Move a time-only result that is already past to the same time tomorrow."""
    if not time_only or instant.astimezone(timezone.utc) >= reference.astimezone(timezone.utc):
        return instant
    try:
        # Aware + timedelta keeps the wall-clock time; normalize fixes the offset.
        return normalize(instant + timedelta(days=1), instant.tzinfo)
    except OverflowError as exc:
        raise InvalidResolvedInstantError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def resolve_human_datetime(
    human_date,
    human_time,
    time_zone,
    client_current_time,
    parser: Optional[DatePhraseParser] = None,
) -> ResolvedDate:
    """
    Resolve a date phrase and a time phrase against a client reference instant.

    Args:
        human_date:          Natural language date, e.g. "next week monday".
        human_time:          Time of day, e.g. "2pm" or "14:30".
        time_zone:           IANA timezone, e.g. "America/Chicago".
        client_current_time: The client's "now" in ISO 8601, e.g. "2024-01-15T10:00:00Z".
        parser:              Date phrase parser; defaults to dateparser.

    Raises:
        DateResolutionError: any input is missing or cannot be resolved.
    """
    _require_text("humanDate", human_date)
    _require_text("humanTime", human_time)
    _require_text("timeZone", time_zone)
    _require_text("clientCurrentTime", client_current_time)

    tz = require_zone(time_zone)
    reference = parse_reference_instant(client_current_time, tz)

    parser = parser or DateparserPhraseParser()
    candidates = parser.parse(human_date, reference)
    if not candidates:
        raise DatePhraseUnresolvedError(human_date)
    components = candidates[0]

    time_of_day = parse_time_of_day(human_time)
    instant = combine_fields(components, tz, time_of_day)
    instant = roll_forward(instant, reference, only_time_specified(components))

    logger.info(
        "Resolved %r at %r in %s to %s", human_date, human_time, time_zone, format_instant(instant)
    )
    return ResolvedDate(
        instant=instant,
        time_zone=time_zone,
        human_date=human_date,
        human_time=human_time,
        client_current_time=client_current_time,
    )


def resolve_text(
    text,
    time_zone=None,
    now=None,
    parser: Optional[DatePhraseParser] = None,
    clock: Clock = system_clock,
    default_zone: str = config.DEFAULT_TIME_ZONE,
) -> ResolvedText:
    """
    Best-effort resolution of a single combined phrase such as "friday at 3pm".

    Only a missing ``text`` is an error. An unknown timezone falls back to
    ``default_zone``, a missing or unparseable ``now`` falls back to
    ``clock``, and a phrase with no recognisable date returns ``now`` with
    an explanatory message.
    """
    _require_text("text", text)

    tz, zone_key = resolve_zone(time_zone, default_zone)
    reference = resolve_reference_instant(now, tz, clock)

    parser = parser or DateparserPhraseParser()
    candidates = parser.parse(text, reference)
    if not candidates:
        logger.info("No date found in %r, returning the reference instant", text)
        return ResolvedText(
            instant=reference,
            time_zone=zone_key,
            original_text=text,
            message=f"Could not find a date in '{text}'; returned the current time instead",
        )
    components = candidates[0]

    instant = combine_fields(components, tz)
    instant = roll_forward(instant, reference, only_time_specified(components))
    return ResolvedText(instant=instant, time_zone=zone_key, original_text=text)
