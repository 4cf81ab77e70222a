"""Unit tests for timezone validation, reference instant parsing and formatting."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from errors import InvalidReferenceInstantError, InvalidTimezoneError
from timezone_utils import (
    format_instant,
    is_valid_timezone,
    parse_reference_instant,
    require_zone,
    resolve_reference_instant,
    resolve_zone,
)

CHICAGO = ZoneInfo("America/Chicago")


class TestTimezoneValidation:
    @pytest.mark.parametrize("name", ["America/Chicago", "Europe/London", "Asia/Kolkata", "UTC"])
    def test_known_zones(self, name):
        assert is_valid_timezone(name)

    @pytest.mark.parametrize("name", ["Nowhere/Fake", "", "   ", None, 123, "../etc/passwd", "CST-6-nope"])
    def test_unknown_or_malformed_zones(self, name):
        assert not is_valid_timezone(name)

    def test_require_zone_rejects_unknown(self):
        with pytest.raises(InvalidTimezoneError) as excinfo:
            require_zone("Nowhere/Fake")

        assert "Nowhere/Fake" in excinfo.value.message

    def test_resolve_zone_keeps_valid_value(self):
        tz, key = resolve_zone("Europe/London", "America/Chicago")

        assert key == "Europe/London"
        assert tz == ZoneInfo("Europe/London")

    @pytest.mark.parametrize("name", [None, "Nowhere/Fake", 42])
    def test_resolve_zone_falls_back_to_default(self, name):
        tz, key = resolve_zone(name, "America/Chicago")

        assert key == "America/Chicago"
        assert tz == CHICAGO


class TestReferenceInstant:
    def test_utc_suffix_is_converted_not_reinterpreted(self):
        now = parse_reference_instant("2024-01-15T10:00:00Z", CHICAGO)

        assert now.isoformat() == "2024-01-15T04:00:00-06:00"

    def test_explicit_offset_is_honoured(self):
        now = parse_reference_instant("2024-01-15T10:00:00+01:00", CHICAGO)

        assert now == datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
        assert now.tzinfo == CHICAGO

    def test_naive_value_is_wall_clock_in_target_zone(self):
        now = parse_reference_instant("2024-01-15T10:00:00", CHICAGO)

        assert now.isoformat() == "2024-01-15T10:00:00-06:00"

    def test_date_only_means_local_midnight(self):
        now = parse_reference_instant("2024-07-04", CHICAGO)

        assert now.isoformat() == "2024-07-04T00:00:00-05:00"

    @pytest.mark.parametrize("value", ["not-a-date", "2024-02-30T10:00:00Z", "", None, 1705312800])
    def test_invalid_values_raise(self, value):
        with pytest.raises(InvalidReferenceInstantError):
            parse_reference_instant(value, CHICAGO)

    def test_best_effort_uses_clock_when_missing(self, fixed_clock):
        now = resolve_reference_instant(None, CHICAGO, fixed_clock)

        assert now.isoformat() == "2024-01-15T10:00:00-06:00"

    def test_best_effort_uses_clock_when_unparseable(self, fixed_clock):
        now = resolve_reference_instant("yesterday-ish", CHICAGO, fixed_clock)

        assert now.isoformat() == "2024-01-15T10:00:00-06:00"

    def test_best_effort_prefers_supplied_value(self, fixed_clock):
        now = resolve_reference_instant("2024-03-01T12:00:00Z", CHICAGO, fixed_clock)

        assert now.isoformat() == "2024-03-01T06:00:00-06:00"


class TestFormatInstant:
    def test_drops_fractional_seconds(self):
        dt = datetime(2024, 1, 15, 14, 0, 5, 123456, tzinfo=CHICAGO)

        assert format_instant(dt) == "2024-01-15T14:00:05-06:00"

    def test_zero_offset_is_numeric(self):
        dt = datetime(2024, 1, 15, 14, 0, tzinfo=ZoneInfo("Europe/London"))

        assert format_instant(dt) == "2024-01-15T14:00:00+00:00"

    def test_daylight_saving_offset(self):
        dt = datetime(2024, 7, 15, 14, 0, tzinfo=CHICAGO)

        assert format_instant(dt) == "2024-07-15T14:00:00-05:00"

    def test_formatted_value_parses_back_to_same_instant(self):
        dt = datetime(2024, 11, 3, 1, 30, tzinfo=CHICAGO)

        again = parse_reference_instant(format_instant(dt), CHICAGO)

        assert again == dt
        assert format_instant(again) == format_instant(dt)
