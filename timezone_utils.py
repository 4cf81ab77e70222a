"""
Timezone utilities.

All functions use Python's zoneinfo module so instants are always computed
in one explicit IANA zone, never in the host's local timezone.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from errors import InvalidReferenceInstantError, InvalidTimezoneError

logger = logging.getLogger(__name__)

Clock = Callable[[ZoneInfo], datetime]


def system_clock(tz: ZoneInfo) -> datetime:
    """Current wall-clock time in ``tz``. The only place the host clock is read."""
    return datetime.now(tz)


def is_valid_timezone(name) -> bool:
    """Return True if ``name`` is a recognised IANA timezone identifier."""
    if not isinstance(name, str) or not name.strip():
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def require_zone(name) -> ZoneInfo:
    """
    Load an IANA zone or fail.

    Raises:
        InvalidTimezoneError: ``name`` is not a recognised zone identifier.
    """
    if not is_valid_timezone(name):
        raise InvalidTimezoneError(name)
    return ZoneInfo(name)


def resolve_zone(name: Optional[str], default: str) -> tuple[ZoneInfo, str]:
    """
    Load ``name`` if it is a valid zone, otherwise fall back to ``default``.

    Returns the zone together with the identifier actually used.
    """
    if is_valid_timezone(name):
        return ZoneInfo(name), name
    if name is not None:
        logger.info("Unrecognised timezone %r, falling back to %s", name, default)
    return ZoneInfo(default), default


def normalize(dt: datetime, tz: ZoneInfo) -> datetime:
    """
    Re-express ``dt`` in ``tz`` via UTC.

    Wall-clock times that fall inside a DST gap come out shifted forward,
    e.g. 02:30 on a spring-forward night becomes 03:30.
    """
    return dt.astimezone(timezone.utc).astimezone(tz)


def parse_reference_instant(value: str, tz: ZoneInfo) -> datetime:
    """
    Parse an ISO 8601 instant and convert it into ``tz``.

    A trailing ``Z`` or numeric offset is honoured and the instant is
    converted, not reinterpreted. A string without an offset is taken as
    wall-clock time in ``tz``.

    Args:
        value: ISO 8601 string, e.g. "2024-01-15T10:00:00Z".
        tz:    Target zone.

    Raises:
        InvalidReferenceInstantError: the string is not a valid instant.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidReferenceInstantError(value)
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as exc:
        raise InvalidReferenceInstantError(value) from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return normalize(parsed, tz)


def resolve_reference_instant(value: Optional[str], tz: ZoneInfo, clock: Clock = system_clock) -> datetime:
    """
    Best-effort variant of :func:`parse_reference_instant`.

    Falls back to ``clock(tz)`` when ``value`` is absent or unparseable.
    """
    if value is None:
        return normalize(clock(tz), tz)
    try:
        return parse_reference_instant(value, tz)
    except InvalidReferenceInstantError:
        logger.warning("Ignoring unparseable reference instant %r, using current time", value)
        return normalize(clock(tz), tz)


def format_instant(dt: datetime) -> str:
    """ISO 8601 with seconds precision and a numeric UTC offset, e.g. 2024-01-15T14:00:00-06:00."""
    return dt.isoformat(timespec="seconds")
