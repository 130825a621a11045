"""
Domain service: Climate stress indices.

Computes three 0-100 indices from a weather snapshot and farm attributes:
- Heat stress (season-specific step function on maximum temperature)
- Soil moisture stress (humidity and forecast rainfall, scaled by land type)
- Rainfall irregularity (deviation from expected seasonal rainfall)

Every function here is pure; the same inputs always produce the same output.
"""
import logging
from datetime import date
from typing import Optional

from agroclimate.domain.models import (
    FarmContext,
    HeatStress,
    RainfallIrregularity,
    SoilMoistureStress,
    StressIndicators,
    WeatherSnapshot,
)
from agroclimate.domain.reference_data import (
    DEFAULT_MOISTURE_FACTOR,
    DEFAULT_SEASON,
    EXPECTED_RAINFALL_MM,
    GLOBAL_EXPECTED_RAINFALL_MM,
    HUMIDITY_MOISTURE_WEIGHT,
    LAND_TYPE_MOISTURE_FACTOR,
    RAINFALL_MOISTURE_WEIGHT,
    REFERENCE_RAINFALL_MM,
    SEASON_CALENDAR,
    SEASON_HEAT_THRESHOLDS,
)
from agroclimate.utils.numeric import clamp, round_half_up

logger = logging.getLogger(__name__)


# ============================================================
# Season resolution
# ============================================================

def season_for_month(month_index: int) -> str:
    """
    Agricultural season for a 0-based month index (0 = January).

    The calendar is checked kharif, rabi, summer in that order and the first
    match wins.

    Args:
        month_index: Month number from 0 to 11

    Returns:
        Season name
    """
    for season, months in SEASON_CALENDAR:
        if month_index in months:
            return season.value
    return DEFAULT_SEASON.value


def current_season(today: Optional[date] = None) -> str:
    """Season for today's date (or the given date)."""
    today = today or date.today()
    return season_for_month(today.month - 1)


def resolve_season(
    override: Optional[str] = None,
    farm: Optional[FarmContext] = None,
    today: Optional[date] = None,
) -> str:
    """
    Pick the season for an assessment.

    Precedence: explicit override, then the farm's configured season,
    then the calendar season for today.
    """
    for candidate in (override, farm.season if farm else None):
        if candidate and candidate.strip():
            return candidate.strip().lower()
    return current_season(today)


# ============================================================
# Heat stress
# ============================================================

def calculate_heat_stress(
    temperature: float,
    max_temp: float,
    season: str,
) -> HeatStress:
    """
    Heat stress index from the day's maximum temperature.

    Highest matching band wins: >= extreme is 100, >= severe is 80,
    >= moderate is 50, >= optimal is 25, anything cooler is 0. Unknown
    seasons use the kharif profile.

    Args:
        temperature: Current temperature in °C
        max_temp: Maximum temperature in °C
        season: Season name

    Returns:
        HeatStress result
    """
    thresholds = SEASON_HEAT_THRESHOLDS.get(
        season, SEASON_HEAT_THRESHOLDS[DEFAULT_SEASON.value]
    )

    if max_temp >= thresholds.extreme:
        value, level = 100, "extreme"
    elif max_temp >= thresholds.severe:
        value, level = 80, "high"
    elif max_temp >= thresholds.moderate:
        value, level = 50, "medium"
    elif max_temp >= thresholds.optimal:
        value, level = 25, "low"
    else:
        value, level = 0, "low"

    return HeatStress(
        value=value,
        level=level,
        temperature=temperature,
        max_temp=max_temp,
        threshold=thresholds.optimal,
    )


# ============================================================
# Soil moisture stress
# ============================================================

def estimate_soil_moisture(
    humidity: float,
    rainfall: float,
    land_type: Optional[str],
) -> float:
    """
    Estimate relative soil moisture (roughly 0-120) from weather alone.

    40% comes from relative humidity and 60% from forecast rainfall
    saturating at 50 mm; the sum is scaled by the land-type factor.
    """
    rainfall_factor = min(max(rainfall, 0.0) / REFERENCE_RAINFALL_MM, 1.0)
    moisture = (
        HUMIDITY_MOISTURE_WEIGHT * (humidity / 100 * 100)
        + RAINFALL_MOISTURE_WEIGHT * rainfall_factor * 100
    )
    factor = LAND_TYPE_MOISTURE_FACTOR.get(land_type, DEFAULT_MOISTURE_FACTOR)
    return moisture * factor


def calculate_soil_moisture_stress(
    humidity: float,
    rainfall: float,
    land_type: Optional[str],
) -> SoilMoistureStress:
    """
    Soil moisture stress index; higher means drier.

    Args:
        humidity: Relative humidity in percent
        rainfall: Total forecast rainfall in mm
        land_type: irrigated, rainfed or mixed (anything else is neutral)

    Returns:
        SoilMoistureStress result
    """
    moisture = estimate_soil_moisture(humidity, rainfall, land_type)
    stress = clamp(100 - moisture, 0.0, 100.0)

    if stress >= 75:
        level = "critical"
    elif stress >= 50:
        level = "severe"
    elif stress >= 25:
        level = "moderate"
    else:
        level = "adequate"

    return SoilMoistureStress(
        value=round_half_up(stress),
        level=level,
        estimated_moisture=round_half_up(moisture),
    )


# ============================================================
# Rainfall irregularity
# ============================================================

def expected_seasonal_rainfall(season: str, state: Optional[str]) -> float:
    """
    Expected rainfall for a season and state in mm.

    Falls back to the season default, then to the global default when the
    season itself is not in the table.
    """
    by_state = EXPECTED_RAINFALL_MM.get(season)
    if by_state is None:
        return GLOBAL_EXPECTED_RAINFALL_MM
    return by_state.get(state, by_state["default"])


def calculate_rainfall_irregularity(
    actual_rainfall: float,
    state: Optional[str],
    season: str,
    expected_rainfall: Optional[float] = None,
) -> RainfallIrregularity:
    """
    Rainfall irregularity from the deviation against expected rainfall.

    Scored on the absolute deviation: >= 50% is 100 (highly-irregular),
    >= 25% is 60 (irregular), >= 10% is 30 and below that 10. The 10-25%
    band keeps level "normal" with score 30.

    Args:
        actual_rainfall: Observed or forecast rainfall in mm
        state: State name used for the expected-rainfall lookup
        season: Season name
        expected_rainfall: Overrides the table lookup when non-zero

    Returns:
        RainfallIrregularity result
    """
    expected = expected_rainfall or expected_seasonal_rainfall(season, state)

    deviation = (actual_rainfall - expected) / expected * 100
    abs_deviation = abs(deviation)

    if abs_deviation >= 50:
        score, level = 100, "highly-irregular"
    elif abs_deviation >= 25:
        score, level = 60, "irregular"
    elif abs_deviation >= 10:
        score, level = 30, "normal"
    else:
        score, level = 10, "normal"

    return RainfallIrregularity(
        value=score,
        level=level,
        total_rainfall=actual_rainfall,
        expected_rainfall=expected,
        deviation=round_half_up(deviation),
    )


# ============================================================
# All indicators
# ============================================================

def calculate_all_stress_indicators(
    snapshot: WeatherSnapshot,
    farm: FarmContext,
    season: Optional[str] = None,
    today: Optional[date] = None,
) -> StressIndicators:
    """
    Compute every stress index for a farm from one weather snapshot.

    Args:
        snapshot: Weather snapshot (current conditions and forecast)
        farm: Farm attributes
        season: Optional season override
        today: Date used for calendar season resolution (defaults to today)

    Returns:
        StressIndicators for the resolved season
    """
    resolved_season = resolve_season(season, farm, today)
    total_rainfall = snapshot.total_forecast_rainfall()
    current = snapshot.current

    logger.debug(
        f"Stress inputs: season={resolved_season}, tempMax={current.temp_max}, "
        f"humidity={current.humidity}, forecastRainfall={total_rainfall:.1f}mm"
    )

    return StressIndicators(
        heat_stress_index=calculate_heat_stress(
            current.temperature, current.temp_max, resolved_season
        ),
        soil_moisture_stress=calculate_soil_moisture_stress(
            current.humidity, total_rainfall, farm.land_type
        ),
        rainfall_irregularity=calculate_rainfall_irregularity(
            total_rainfall, farm.location.state, resolved_season
        ),
        season=resolved_season,
    )
