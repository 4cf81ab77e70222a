"""Unit tests for freestanding time phrase parsing."""

import pytest

from errors import TimePhraseUnresolvedError
from time_of_day import TimeOfDay, parse_time_of_day


class TestTwelveHourClock:
    @pytest.mark.parametrize(
        "phrase,expected",
        [
            ("2pm", TimeOfDay(14, 0, 0)),
            ("2:30pm", TimeOfDay(14, 30, 0)),
            ("2:30 PM", TimeOfDay(14, 30, 0)),
            ("9am", TimeOfDay(9, 0, 0)),
            ("at 9 am", TimeOfDay(9, 0, 0)),
            ("11:45:30pm", TimeOfDay(23, 45, 30)),
        ],
    )
    def test_converts_to_24_hour(self, phrase, expected):
        assert parse_time_of_day(phrase) == expected

    def test_midnight_and_noon_boundaries(self):
        """12am is hour 0, 12pm stays hour 12."""
        assert parse_time_of_day("12am") == TimeOfDay(0, 0, 0)
        assert parse_time_of_day("12pm") == TimeOfDay(12, 0, 0)
        assert parse_time_of_day("12:30am") == TimeOfDay(0, 30, 0)
        assert parse_time_of_day("12:30pm") == TimeOfDay(12, 30, 0)


class TestTwentyFourHourClock:
    def test_hour_and_minute(self):
        assert parse_time_of_day("14:30") == TimeOfDay(14, 30, 0)

    def test_bare_hour_defaults_minute_to_zero(self):
        assert parse_time_of_day("14") == TimeOfDay(14, 0, 0)

    def test_explicit_seconds(self):
        assert parse_time_of_day("08:15:45") == TimeOfDay(8, 15, 45)

    def test_out_of_range_values_are_left_for_later_validation(self):
        assert parse_time_of_day("25:00") == TimeOfDay(25, 0, 0)


class TestUnparseableTime:
    @pytest.mark.parametrize("phrase", ["afternoon", "noon", "", "half past"])
    def test_descriptive_words_are_rejected(self, phrase):
        with pytest.raises(TimePhraseUnresolvedError) as excinfo:
            parse_time_of_day(phrase)

        assert excinfo.value.phrase == phrase
        assert excinfo.value.error == "Could not parse the time"
        assert phrase in excinfo.value.message
