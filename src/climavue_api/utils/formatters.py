"""Pure helpers for rounding, day/night classification and display labels."""

import math
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

_BACKGROUNDS = (
    (("clear",), "sunny"),
    (("cloud",), "cloudy"),
    (("rain", "drizzle"), "rainy"),
    (("snow",), "snowy"),
    (("storm", "thunderstorm"), "stormy"),
    (("mist", "fog"), "foggy"),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -2
    """
    return math.floor(value + 0.5)


def location_timezone(utc_offset_seconds: int, override: str | None = None) -> tzinfo:
    """Timezone used for calendar days and labels of a place.

    Example:
        >>> location_timezone(3600)
        datetime.timezone(datetime.timedelta(seconds=3600))
    """
    if override:
        return ZoneInfo(override)
    return timezone(timedelta(seconds=utc_offset_seconds))


def is_night_time(current_time: int, sunrise: int, sunset: int) -> bool:
    """Return True when the observation falls before sunrise or after sunset.

    Example:
        >>> is_night_time(100, 200, 300)
        True
        >>> is_night_time(250, 200, 300)
        False
    """
    return current_time < sunrise or current_time > sunset


def format_time(timestamp: int, tz: tzinfo = timezone.utc) -> str:
    """Format epoch seconds as a 12-hour clock time.

    Example:
        >>> format_time(1700000000)
        '10:13 PM'
    """
    moment = datetime.fromtimestamp(timestamp, tz)
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def format_date(timestamp: int, tz: tzinfo = timezone.utc) -> str:
    """Format epoch seconds as a short date.

    Example:
        >>> format_date(1700000000)
        'Tue, Nov 14'
    """
    moment = datetime.fromtimestamp(timestamp, tz)
    return f"{moment:%a}, {moment:%b} {moment.day}"


def format_day_of_week(
    timestamp: int,
    tz: tzinfo = timezone.utc,
    now: datetime | None = None,
) -> str:
    """Label a day relative to now: 'Today', 'Tomorrow' or the weekday name."""
    day = datetime.fromtimestamp(timestamp, tz).date()
    today = (now or datetime.now(tz)).astimezone(tz).date()

    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return f"{day:%A}"


def get_weather_background(condition: str, is_night: bool) -> str:
    """Pick the background theme for a condition code.

    Example:
        >>> get_weather_background("Drizzle", False)
        'rainy'
        >>> get_weather_background("Clear", True)
        'night'
    """
    if is_night:
        return "night"

    normalized = condition.lower()
    for needles, background in _BACKGROUNDS:
        if any(needle in normalized for needle in needles):
            return background
    return "default"


def capitalize_words(text: str) -> str:
    """Upper-case the first letter of each space separated word.

    Example:
        >>> capitalize_words("light rain")
        'Light Rain'
    """
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def get_weather_icon_url(icon: str, base_url: str = "https://openweathermap.org/img/wn") -> str:
    """URL of the 2x PNG for a provider icon code."""
    return f"{base_url}/{icon}@2x.png"
