"""Derivation of hourly and daily views from one 3-hour forecast series.

Both views are computed from the same series so a snapshot needs a single
forecast request. Daily summaries group samples by the local calendar day of
their timestamp and reduce each group to one record:

- ``tempMax`` is the ceiling of the highest temperature, ``tempMin`` the
  half-up rounded lowest temperature.
- ``condition`` is the most frequent condition code. Ties go to the code that
  occurs first in chronological order.
- ``icon`` and ``description`` come from the sample at index ``len(group) // 2``.
- ``precipitation`` and ``humidity`` are rounded means.
"""

import math
from collections import Counter
from collections.abc import Sequence
from datetime import date, datetime, tzinfo

from ..models.weather import DailyForecast, ForecastSample, HourlyForecast
from ..utils.formatters import round_half_up

HOURLY_SAMPLES = 8
MAX_FORECAST_DAYS = 7


def build_hourly(samples: Sequence[ForecastSample]) -> list[HourlyForecast]:
    """Take the first 8 samples (about 24 hours) verbatim.

    Example:
        >>> sample = ForecastSample(dt=0, temp=12.5, humidity=80, pop=0.07,
        ...                         condition="Rain", icon="10d", description="light rain")
        >>> build_hourly([sample])[0].precipitation
        7
    """
    return [
        HourlyForecast(
            time=sample.dt,
            temperature=round_half_up(sample.temp),
            precipitation=round_half_up(sample.pop * 100),
            icon=sample.icon,
            description=sample.description,
        )
        for sample in samples[:HOURLY_SAMPLES]
    ]


def bucket_by_day(
    samples: Sequence[ForecastSample],
    tz: tzinfo,
) -> list[list[ForecastSample]]:
    """Group samples by local calendar date, keeping first-encountered order."""
    buckets: dict[date, list[ForecastSample]] = {}
    for sample in samples:
        day = datetime.fromtimestamp(sample.dt, tz).date()
        buckets.setdefault(day, []).append(sample)
    return list(buckets.values())


def most_frequent_condition(group: Sequence[ForecastSample]) -> str:
    """Most common condition code; ties resolved by first occurrence.

    Example:
        >>> def s(c):
        ...     return ForecastSample(dt=0, temp=0, humidity=0, condition=c,
        ...                           icon="", description="")
        >>> most_frequent_condition([s("Rain"), s("Clouds"), s("Clouds"), s("Rain")])
        'Rain'
    """
    # Counter preserves insertion order, and most_common keeps it among equal counts
    return Counter(sample.condition for sample in group).most_common(1)[0][0]


def summarize_day(group: Sequence[ForecastSample]) -> DailyForecast:
    """Reduce the samples of one calendar day to a daily summary."""
    if not group:
        raise ValueError("Cannot summarize an empty day")

    temps = [sample.temp for sample in group]
    representative = group[len(group) // 2]
    mean_pop = sum(sample.pop for sample in group) / len(group)
    mean_humidity = sum(sample.humidity for sample in group) / len(group)

    return DailyForecast(
        date=group[0].dt,
        tempMax=math.ceil(max(temps)),
        tempMin=round_half_up(min(temps)),
        condition=most_frequent_condition(group),
        icon=representative.icon,
        precipitation=round_half_up(mean_pop * 100),
        humidity=round_half_up(mean_humidity),
        description=representative.description,
    )


def build_daily(
    samples: Sequence[ForecastSample],
    tz: tzinfo,
    max_days: int = MAX_FORECAST_DAYS,
) -> list[DailyForecast]:
    """Summaries for the first `max_days` calendar days covered by the series."""
    return [summarize_day(group) for group in bucket_by_day(samples, tz)[:max_days]]
