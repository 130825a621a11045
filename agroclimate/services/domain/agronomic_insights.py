"""
Domain service: Agronomic analysis of a detailed weather snapshot.

Summarizes the 7-day outlook (temperature, precipitation, moisture, wind),
lists agricultural risks and derives farming recommendations. Used to enrich
responses when the primary provider supplies hourly data and alerts.
"""
import logging
from typing import List, Optional

import numpy as np
from pydantic import Field

from agroclimate.domain.models import CamelModel, CurrentConditions, WeatherSnapshot
from agroclimate.utils.numeric import round_half_up

logger = logging.getLogger(__name__)


class TemperatureAnalysis(CamelModel):
    current: float
    average_7_day: float
    max_7_day: float
    min_7_day: float
    heat_stress_risk: str
    cold_stress_risk: str
    optimal_for_crops: bool


class PrecipitationAnalysis(CamelModel):
    total_7_day: float
    rainy_days: int
    average_probability: int
    next_24h_rain_hours: int = Field(alias="next24hRainHours")
    irrigation_needed: bool
    drought_risk: str
    flood_risk: str


class MoistureAnalysis(CamelModel):
    current_humidity: float
    average_7_day: int
    soil_moisture_estimate: str
    fungal_disease_risk: str


class WindAnalysis(CamelModel):
    current: float
    max_7_day: float
    average_7_day: float
    crop_damage_risk: str


class AgriculturalRisk(CamelModel):
    type: str
    severity: str
    message: str
    action: str


class FarmingRecommendation(CamelModel):
    category: str
    priority: str
    title: str
    description: str


class AgronomicAnalysis(CamelModel):
    temperature: TemperatureAnalysis
    precipitation: PrecipitationAnalysis
    moisture: MoistureAnalysis
    wind: WindAnalysis
    risk_factors: List[AgriculturalRisk]
    recommendations: List[FarmingRecommendation]


def _one_decimal(value: float) -> float:
    return round_half_up(value * 10) / 10


def _band(value: float, high: float, medium: float) -> str:
    if value > high:
        return "high"
    if value > medium:
        return "medium"
    return "low"


def analyze_temperature(snapshot: WeatherSnapshot) -> TemperatureAnalysis:
    maxes = np.array([day.temp_max for day in snapshot.forecast])
    mins = np.array([day.temp_min for day in snapshot.forecast])
    average = float(np.mean((maxes + mins) / 2))
    max_temp = float(maxes.max())
    min_temp = float(mins.min())

    # Cold risk is inverted: lower temperatures are riskier.
    if min_temp < 10:
        cold_risk = "high"
    elif min_temp < 15:
        cold_risk = "medium"
    else:
        cold_risk = "low"

    return TemperatureAnalysis(
        current=snapshot.current.temperature,
        average_7_day=_one_decimal(average),
        max_7_day=max_temp,
        min_7_day=min_temp,
        heat_stress_risk=_band(max_temp, 35, 30),
        cold_stress_risk=cold_risk,
        optimal_for_crops=20 <= average <= 30,
    )


def analyze_precipitation(snapshot: WeatherSnapshot) -> PrecipitationAnalysis:
    rainfall = np.array([day.rainfall or 0.0 for day in snapshot.forecast])
    probabilities = np.array([day.precipitation_probability for day in snapshot.forecast])
    total = float(rainfall.sum())
    average_probability = float(probabilities.mean())
    next_24h_rain_hours = sum(
        1 for hour in snapshot.hourly[:24] if hour.precipitation_probability > 50
    )

    if total < 10:
        drought_risk = "high"
    elif total < 25:
        drought_risk = "medium"
    else:
        drought_risk = "low"

    return PrecipitationAnalysis(
        total_7_day=_one_decimal(total),
        rainy_days=int((rainfall > 1).sum()),
        average_probability=round_half_up(average_probability),
        next_24h_rain_hours=next_24h_rain_hours,
        irrigation_needed=total < 25 and average_probability < 30,
        drought_risk=drought_risk,
        flood_risk=_band(total, 100, 75),
    )


def analyze_moisture(snapshot: WeatherSnapshot) -> MoistureAnalysis:
    average_humidity = float(np.mean([day.humidity for day in snapshot.forecast]))
    return MoistureAnalysis(
        current_humidity=snapshot.current.humidity,
        average_7_day=round_half_up(average_humidity),
        soil_moisture_estimate=_band(average_humidity, 70, 50),
        fungal_disease_risk=_band(average_humidity, 80, 65),
    )


def analyze_wind(snapshot: WeatherSnapshot) -> WindAnalysis:
    speeds = np.array([day.wind_speed for day in snapshot.forecast])
    max_wind = float(speeds.max())
    return WindAnalysis(
        current=snapshot.current.wind_speed,
        max_7_day=_one_decimal(max_wind),
        average_7_day=_one_decimal(float(speeds.mean())),
        crop_damage_risk=_band(max_wind, 50, 30),
    )


def identify_agricultural_risks(
    temperature: TemperatureAnalysis,
    precipitation: PrecipitationAnalysis,
    moisture: MoistureAnalysis,
    current: CurrentConditions,
    snapshot: WeatherSnapshot,
) -> List[AgriculturalRisk]:
    """List agricultural risks, followed by one entry per severe or extreme alert."""
    risks = []

    if temperature.heat_stress_risk == "high":
        risks.append(AgriculturalRisk(
            type="heat_stress",
            severity="high",
            message="High temperature alert! Crops may experience heat stress.",
            action="Increase irrigation frequency and provide shade if possible.",
        ))

    if precipitation.drought_risk == "high":
        risks.append(AgriculturalRisk(
            type="drought",
            severity="high",
            message="Low rainfall expected. Drought conditions likely.",
            action="Plan for supplemental irrigation. Consider drought-resistant crops.",
        ))

    if precipitation.flood_risk == "high":
        risks.append(AgriculturalRisk(
            type="flood",
            severity="high",
            message="Heavy rainfall expected. Flood risk is high.",
            action="Ensure proper drainage. Protect crops from waterlogging.",
        ))

    if moisture.fungal_disease_risk == "high":
        risks.append(AgriculturalRisk(
            type="disease",
            severity="medium",
            message="High humidity may promote fungal diseases.",
            action="Monitor crops closely. Apply preventive fungicides if needed.",
        ))

    if current.wind_speed > 40:
        risks.append(AgriculturalRisk(
            type="wind",
            severity="medium",
            message="Strong winds detected.",
            action="Secure tall crops and protect young seedlings.",
        ))

    for alert in snapshot.alerts:
        if alert.severity.lower() in ("severe", "extreme"):
            risks.append(AgriculturalRisk(
                type="weather_alert",
                severity="high",
                message=f"{alert.event}: {alert.headline}",
                action=alert.instruction or "Follow official guidance.",
            ))

    return risks


def generate_recommendations(
    temperature: TemperatureAnalysis,
    precipitation: PrecipitationAnalysis,
    moisture: MoistureAnalysis,
) -> List[FarmingRecommendation]:
    recommendations = []

    if precipitation.irrigation_needed:
        recommendations.append(FarmingRecommendation(
            category="irrigation",
            priority="high",
            title="Irrigation Required",
            description="Low rainfall expected in coming days. Plan for irrigation.",
        ))

    if temperature.optimal_for_crops and precipitation.next_24h_rain_hours < 5:
        recommendations.append(FarmingRecommendation(
            category="planting",
            priority="medium",
            title="Good Planting Conditions",
            description="Temperature and moisture conditions are favorable for planting.",
        ))

    if precipitation.next_24h_rain_hours > 10:
        recommendations.append(FarmingRecommendation(
            category="fertilizer",
            priority="medium",
            title="Delay Fertilizer Application",
            description="Heavy rain expected. Wait for drier conditions to apply fertilizers.",
        ))

    if moisture.fungal_disease_risk == "high":
        recommendations.append(FarmingRecommendation(
            category="pest_control",
            priority="high",
            title="Disease Prevention",
            description="High humidity increases disease risk. Monitor and apply preventive measures.",
        ))

    if precipitation.next_24h_rain_hours == 0 and 20 < temperature.current < 35:
        recommendations.append(FarmingRecommendation(
            category="harvesting",
            priority="medium",
            title="Good Harvesting Weather",
            description="Dry conditions with moderate temperature - ideal for harvesting.",
        ))

    return recommendations


def analyze_weather(snapshot: WeatherSnapshot) -> Optional[AgronomicAnalysis]:
    """
    Full agronomic analysis of a snapshot.

    Args:
        snapshot: Weather snapshot, ideally with hourly data and alerts

    Returns:
        AgronomicAnalysis, or None when the snapshot has no forecast
    """
    if not snapshot.forecast:
        return None

    temperature = analyze_temperature(snapshot)
    precipitation = analyze_precipitation(snapshot)
    moisture = analyze_moisture(snapshot)
    wind = analyze_wind(snapshot)
    risks = identify_agricultural_risks(
        temperature, precipitation, moisture, snapshot.current, snapshot
    )

    logger.debug(f"Agronomic analysis produced {len(risks)} risk factors")

    return AgronomicAnalysis(
        temperature=temperature,
        precipitation=precipitation,
        moisture=moisture,
        wind=wind,
        risk_factors=risks,
        recommendations=generate_recommendations(temperature, precipitation, moisture),
    )
