"""Tests for rounding, day/night and label helpers."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from climavue_api.utils.formatters import (
    capitalize_words,
    format_date,
    format_day_of_week,
    format_time,
    get_weather_background,
    get_weather_icon_url,
    is_night_time,
    location_timezone,
    round_half_up,
)

NOON = int(datetime(2026, 1, 20, 12, tzinfo=timezone.utc).timestamp())


class TestRounding:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2.5, 3), (2.49, 2), (-2.5, -2), (-2.51, -3), (0.0, 0), (17.4, 17)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestNightTime:
    """Test the day/night classification."""

    def test_before_sunrise(self):
        assert is_night_time(100, 200, 300) is True

    def test_after_sunset(self):
        assert is_night_time(301, 200, 300) is True

    def test_daytime_includes_bounds(self):
        assert is_night_time(200, 200, 300) is False
        assert is_night_time(250, 200, 300) is False
        assert is_night_time(300, 200, 300) is False


class TestLabels:
    """Test time and date labels."""

    def test_format_time(self):
        assert format_time(NOON) == "12:00 PM"
        assert format_time(NOON - 12 * 3600) == "12:00 AM"
        assert format_time(NOON + 3 * 3600 + 5 * 60) == "3:05 PM"

    def test_format_time_in_timezone(self):
        assert format_time(NOON, timezone(timedelta(hours=-5))) == "7:00 AM"

    def test_format_date(self):
        assert format_date(NOON) == "Tue, Jan 20"
        assert format_date(NOON, timezone(timedelta(hours=13))) == "Wed, Jan 21"

    def test_day_of_week(self):
        now = datetime(2026, 1, 20, 9, tzinfo=timezone.utc)

        assert format_day_of_week(NOON, now=now) == "Today"
        assert format_day_of_week(NOON + 86400, now=now) == "Tomorrow"
        assert format_day_of_week(NOON + 2 * 86400, now=now) == "Thursday"

    def test_day_of_week_uses_timezone_for_today(self):
        # 11:00 UTC on Jan 20 is already midnight of Jan 21 in Auckland
        now = datetime(2026, 1, 20, 11, tzinfo=timezone.utc)
        midnight_utc = NOON + 12 * 3600

        assert format_day_of_week(midnight_utc, now=now) == "Tomorrow"
        assert format_day_of_week(midnight_utc, ZoneInfo("Pacific/Auckland"), now=now) == "Today"


class TestTimezone:
    def test_location_offset(self):
        assert location_timezone(-10800).utcoffset(None) == timedelta(hours=-3)

    def test_override_wins(self):
        assert location_timezone(-10800, "Europe/Paris") == ZoneInfo("Europe/Paris")


class TestBackground:
    """Test background themes."""

    @pytest.mark.parametrize(
        ("condition", "expected"),
        [
            ("Clear", "sunny"),
            ("Clouds", "cloudy"),
            ("Rain", "rainy"),
            ("Drizzle", "rainy"),
            ("Snow", "snowy"),
            ("Thunderstorm", "stormy"),
            ("Mist", "foggy"),
            ("Fog", "foggy"),
            ("Haze", "default"),
        ],
    )
    def test_daytime_backgrounds(self, condition, expected):
        assert get_weather_background(condition, False) == expected

    def test_night_overrides_condition(self):
        assert get_weather_background("Rain", True) == "night"


class TestText:
    def test_capitalize_words(self):
        assert capitalize_words("light intensity drizzle") == "Light Intensity Drizzle"
        assert capitalize_words("") == ""

    def test_icon_url(self):
        assert get_weather_icon_url("10n") == "https://openweathermap.org/img/wn/10n@2x.png"
        assert get_weather_icon_url("01d", "http://icons.local") == "http://icons.local/01d@2x.png"
