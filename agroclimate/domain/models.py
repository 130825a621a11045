"""
Domain models for weather, farm and climate assessment data.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, databases, etc.).

Attributes are snake_case in Python and serialized with camelCase aliases,
which is the shape the dashboard consumes.
"""
from datetime import date, datetime
from typing import Annotated, List, Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

Coordinates = Annotated[List[float], Field(min_length=2, max_length=2)]


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class FrozenCamelModel(CamelModel):
    """Immutable camelCase model for computed results."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


# ============================================================
# Weather
# ============================================================

class CurrentConditions(CamelModel):
    """Current weather conditions at a location."""
    temperature: float = 0.0
    feels_like: float = 0.0
    temp_min: float = 0.0
    temp_max: float = 0.0
    humidity: float = 0.0
    pressure: float = 1013.0
    wind_speed: float = 0.0
    wind_direction: float = 0.0
    cloud_cover: float = 0.0
    precipitation: float = 0.0
    uv_index: float = 0.0
    visibility: float = 10.0
    weather_code: Optional[int] = None
    description: str = "Unknown"
    observed_at: Optional[datetime] = None


class DailyForecast(CamelModel):
    """A single day of forecast."""
    date: date
    temp: float = 0.0
    temp_min: float = 0.0
    temp_max: float = 0.0
    humidity: float = 0.0
    rainfall: Optional[float] = Field(default=0.0, description="Precipitation sum in mm")
    precipitation_probability: float = 0.0
    wind_speed: float = 0.0
    uv_index: float = 0.0
    conditions: str = "Unknown"
    weather_code: Optional[int] = None


class HourlyForecast(CamelModel):
    """A single hour of forecast (primary provider only)."""
    time: datetime
    temperature: float = 0.0
    precipitation_probability: float = 0.0
    humidity: float = 0.0
    wind_speed: float = 0.0
    condition: str = "Unknown"


class WeatherAlert(CamelModel):
    """A public weather alert issued for a location."""
    severity: str = "unknown"
    urgency: str = "unknown"
    event: str = "Unknown Event"
    headline: str = ""
    description: str = ""
    instruction: str = ""
    areas: List[str] = Field(default_factory=list)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class WeatherSnapshot(CamelModel):
    """Current conditions plus an ordered daily forecast."""
    current: CurrentConditions
    forecast: List[DailyForecast] = Field(default_factory=list)
    hourly: List[HourlyForecast] = Field(default_factory=list, exclude=True)
    alerts: List[WeatherAlert] = Field(default_factory=list, exclude=True)

    def total_forecast_rainfall(self) -> float:
        """Sum of forecast rainfall; absent or negative days count as zero."""
        return sum(max(day.rainfall or 0.0, 0.0) for day in self.forecast)


# ============================================================
# Farm
# ============================================================

class FarmLocation(CamelModel):
    """Where a farm is. Coordinates are stored as [longitude, latitude]."""
    state: Optional[str] = None
    district: Optional[str] = None
    coordinates: Optional[Coordinates] = Field(
        default=None,
        description="[longitude, latitude]",
    )

    @property
    def latitude(self) -> Optional[float]:
        return self.coordinates[1] if self.coordinates else None

    @property
    def longitude(self) -> Optional[float]:
        return self.coordinates[0] if self.coordinates else None


class FarmContext(CamelModel):
    """Farm attributes consumed read-only by the assessment."""
    location: FarmLocation = Field(default_factory=FarmLocation)
    land_type: Optional[str] = Field(
        default=None,
        description="irrigated, rainfed or mixed; other values use neutral defaults",
    )
    soil_type: Optional[str] = Field(
        default=None,
        description="alluvial, black, red, laterite, desert, mountain, saline, peaty or forest; not used in scoring",
    )
    water_source: List[str] = Field(default_factory=list)
    season: Optional[str] = Field(
        default=None,
        description="Overrides the calendar season when set",
    )


class ResolvedLocation(FrozenCamelModel):
    """Location actually used for an assessment."""
    state: str
    district: str
    coordinates: List[float] = Field(description="[longitude, latitude]")


# ============================================================
# Stress indicators
# ============================================================

class HeatStress(FrozenCamelModel):
    value: int
    level: str
    temperature: float
    max_temp: float
    threshold: float


class SoilMoistureStress(FrozenCamelModel):
    value: int
    level: str
    estimated_moisture: int


class RainfallIrregularity(FrozenCamelModel):
    value: int
    level: str
    total_rainfall: float
    expected_rainfall: float
    deviation: int = Field(description="Deviation from expected rainfall in percent")


class StressIndicators(FrozenCamelModel):
    """All climate stress indices for one season."""
    heat_stress_index: HeatStress
    soil_moisture_stress: SoilMoistureStress
    rainfall_irregularity: RainfallIrregularity
    season: str


# ============================================================
# Risk assessment
# ============================================================

class RiskScore(FrozenCamelModel):
    """Additive heuristic risk with the factors that contributed to it."""
    probability: int = Field(ge=0, le=100)
    level: str
    factors: List[str] = Field(default_factory=list)


class RiskAssessment(FrozenCamelModel):
    flood_risk: RiskScore
    drought_risk: RiskScore
    calculated_at: datetime
