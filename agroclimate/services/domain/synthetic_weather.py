"""
Domain service: Synthetic weather used when every provider is unavailable.

Produces typical monsoon-plain conditions and a smooth 7-day series so the
scoring pipeline always has input. The series depends only on the start date
and the seed.
"""
from datetime import date, timedelta
from typing import Optional

import numpy as np

from agroclimate.domain.models import CurrentConditions, DailyForecast, WeatherSnapshot
from agroclimate.domain.reference_data import describe_weather_code

SYNTHETIC_FORECAST_DAYS = 7
RAIN_DAY_CADENCE = 3

TYPICAL_CONDITIONS = CurrentConditions(
    temperature=28,
    feels_like=30,
    temp_min=22,
    temp_max=34,
    humidity=65,
    pressure=1013,
    wind_speed=12,
    cloud_cover=40,
    precipitation=0,
    uv_index=6,
    weather_code=2,
    description="Partly cloudy",
)


def build_synthetic_snapshot(
    today: Optional[date] = None,
    seed: int = 42,
    days: int = SYNTHETIC_FORECAST_DAYS,
) -> WeatherSnapshot:
    """
    Build a deterministic weather snapshot.

    Temperature and humidity follow sine/cosine curves over the day index;
    every third day (starting with the first) gets 5-20 mm of rain drawn from
    a seeded generator.

    Args:
        today: First forecast day is the day after this date
        seed: Seed for rainfall and wind draws
        days: Number of forecast days

    Returns:
        WeatherSnapshot with typical current conditions
    """
    today = today or date.today()
    rng = np.random.default_rng(seed)

    index = np.arange(days)
    temps = 28 + np.sin(index) * 3
    temp_mins = 22 + np.sin(index) * 2
    temp_maxs = 34 + np.cos(index) * 2
    humidity = 60 + np.sin(index * 0.5) * 10
    rain_draws = 5 + rng.random(days) * 15
    rainfall = np.where(index % RAIN_DAY_CADENCE == 0, rain_draws, 0.0)
    wind = 10 + rng.random(days) * 5

    forecast = []
    for i in range(days):
        code = 2 if i % 2 == 0 else 3
        forecast.append(DailyForecast(
            date=today + timedelta(days=i + 1),
            temp=round(float(temps[i]), 1),
            temp_min=round(float(temp_mins[i]), 1),
            temp_max=round(float(temp_maxs[i]), 1),
            humidity=round(float(humidity[i]), 1),
            rainfall=round(float(rainfall[i]), 1),
            wind_speed=round(float(wind[i]), 1),
            conditions=describe_weather_code(code),
            weather_code=code,
        ))

    return WeatherSnapshot(
        current=TYPICAL_CONDITIONS.model_copy(),
        forecast=forecast,
    )
