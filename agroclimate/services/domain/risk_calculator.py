"""
Domain service: Flood and drought risk probabilities.

Both risks are additive point scores capped at 100. Each condition that
fires adds its points and exactly one human-readable factor, in evaluation
order; the dashboard renders the factor list as-is.
"""
from datetime import datetime, timezone
from typing import Optional

from agroclimate.domain.models import (
    FarmContext,
    RiskAssessment,
    RiskScore,
    StressIndicators,
    WeatherSnapshot,
)
from agroclimate.domain.reference_data import (
    DROUGHT_PRONE_STATES,
    FLOOD_PRONE_STATES,
    LandType,
)
from agroclimate.utils.numeric import round_half_up

HIGH_RISK_THRESHOLD = 60
MEDIUM_RISK_THRESHOLD = 30


def risk_level(probability: float) -> str:
    """Bucket a risk probability into low / medium / high."""
    if probability >= HIGH_RISK_THRESHOLD:
        return "high"
    if probability >= MEDIUM_RISK_THRESHOLD:
        return "medium"
    return "low"


def _score(probability: float, factors: list[str]) -> RiskScore:
    probability = round_half_up(min(probability, 100))
    return RiskScore(
        probability=probability,
        level=risk_level(probability),
        factors=factors,
    )


def calculate_flood_risk(
    snapshot: WeatherSnapshot,
    farm: FarmContext,
    stress: StressIndicators,
) -> RiskScore:
    """
    Flood risk from forecast rainfall, land type, irregularity and region.

    Args:
        snapshot: Weather snapshot
        farm: Farm attributes
        stress: Stress indicators computed from the same snapshot

    Returns:
        RiskScore with contributing factors
    """
    probability = 0
    factors: list[str] = []

    total_rainfall = snapshot.total_forecast_rainfall()
    if total_rainfall > 200:
        probability += 40
        factors.append("Heavy rainfall predicted (>200mm)")
    elif total_rainfall > 100:
        probability += 25
        factors.append("Moderate rainfall predicted (>100mm)")
    elif total_rainfall > 50:
        probability += 10
        factors.append("Light to moderate rainfall")

    if farm.land_type == LandType.RAINFED.value:
        probability += 20
        factors.append("Rainfed land more vulnerable")
    elif farm.land_type == LandType.MIXED.value:
        probability += 10
        factors.append("Mixed land partially vulnerable")

    irregularity = stress.rainfall_irregularity
    if irregularity.level == "highly-irregular" and irregularity.deviation > 0:
        probability += 20
        factors.append("High rainfall irregularity detected")

    state = farm.location.state
    if state in FLOOD_PRONE_STATES:
        probability += 10
        factors.append(f"{state} is in flood-prone region")

    return _score(probability, factors)


def calculate_drought_risk(
    snapshot: WeatherSnapshot,
    farm: FarmContext,
    stress: StressIndicators,
) -> RiskScore:
    """
    Drought risk from low rainfall, heat, soil moisture, water access and region.

    Args:
        snapshot: Weather snapshot
        farm: Farm attributes
        stress: Stress indicators computed from the same snapshot

    Returns:
        RiskScore with contributing factors
    """
    probability = 0
    factors: list[str] = []

    total_rainfall = snapshot.total_forecast_rainfall()
    if total_rainfall < 10:
        probability += 40
        factors.append("Very low rainfall predicted (<10mm)")
    elif total_rainfall < 30:
        probability += 25
        factors.append("Low rainfall predicted (<30mm)")
    elif total_rainfall < 50:
        probability += 10
        factors.append("Below normal rainfall")

    heat_level = stress.heat_stress_index.level
    if heat_level == "extreme":
        probability += 25
        factors.append("Extreme heat stress detected")
    elif heat_level == "high":
        probability += 15
        factors.append("High heat stress detected")

    moisture_level = stress.soil_moisture_stress.level
    if moisture_level == "critical":
        probability += 20
        factors.append("Critical soil moisture deficit")
    elif moisture_level == "severe":
        probability += 12
        factors.append("Severe soil moisture stress")

    if farm.land_type == LandType.RAINFED.value and not farm.water_source:
        probability += 15
        factors.append("Rainfed land with no irrigation")
    elif farm.land_type == LandType.RAINFED.value:
        probability += 8
        factors.append("Rainfed land dependent on rainfall")

    state = farm.location.state
    if state in DROUGHT_PRONE_STATES:
        probability += 10
        factors.append(f"{state} is in drought-prone region")

    return _score(probability, factors)


def calculate_risk_assessment(
    snapshot: WeatherSnapshot,
    farm: FarmContext,
    stress: StressIndicators,
    calculated_at: Optional[datetime] = None,
) -> RiskAssessment:
    """Flood and drought risk for one snapshot, stamped with the calculation time."""
    return RiskAssessment(
        flood_risk=calculate_flood_risk(snapshot, farm, stress),
        drought_risk=calculate_drought_risk(snapshot, farm, stress),
        calculated_at=calculated_at or datetime.now(timezone.utc),
    )
