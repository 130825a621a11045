"""
Application service: Orchestration layer for climate assessments.

Resolves the location, obtains weather through the orchestrator, runs the
stress and risk calculators and assembles the result. No scoring logic
lives here.
"""
import logging
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import Field

from agroclimate.config import settings
from agroclimate.domain.exceptions import InvalidFarmContext
from agroclimate.domain.models import (
    CamelModel,
    FarmContext,
    ResolvedLocation,
    RiskAssessment,
    StressIndicators,
    WeatherSnapshot,
)
from agroclimate.services.application.weather_orchestrator import (
    ProviderInsights,
    WeatherOrchestrator,
)
from agroclimate.services.domain.risk_calculator import calculate_risk_assessment
from agroclimate.services.domain.stress_calculator import calculate_all_stress_indicators

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
CURRENT_LOCATION = "Current Location"


class ClimateStressResult(CamelModel):
    """Full climate stress assessment for a location."""
    stress_indicators: StressIndicators
    risk_assessment: RiskAssessment
    weather_data: WeatherSnapshot
    season: str
    location: ResolvedLocation
    data_source: str = Field(description="Provider that produced the weather data")
    calculated_at: datetime
    provider_insights: Optional[ProviderInsights] = None


class RiskOnlyResult(CamelModel):
    """Flood and drought risk for a farm without stress detail."""
    risk_assessment: RiskAssessment
    location: ResolvedLocation
    calculated_at: datetime


class ClimateService:
    """
    Application service for climate stress and risk assessments.

    Coordinates the weather orchestrator with the domain calculators.
    """

    def __init__(
        self,
        orchestrator: WeatherOrchestrator,
        default_location: Optional[ResolvedLocation] = None,
    ):
        """
        Initialize the service with dependencies.

        Args:
            orchestrator: Weather source selection with fallback
            default_location: Used when neither query nor farm has coordinates
        """
        self.orchestrator = orchestrator
        self.default_location = default_location or ResolvedLocation(
            state=settings.default_state,
            district=settings.default_district,
            coordinates=[settings.default_longitude, settings.default_latitude],
        )

    def resolve_location(
        self,
        farm: FarmContext,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        state: Optional[str] = None,
        district: Optional[str] = None,
    ) -> ResolvedLocation:
        """
        Pick the location for a stress query.

        Precedence: explicit coordinates (both lat and lng), then the farm's
        coordinates, then the configured default location.

        Args:
            farm: Farm attributes
            lat: Query latitude
            lng: Query longitude
            state: Query state name
            district: Query district name

        Returns:
            ResolvedLocation
        """
        location = farm.location

        if lat is not None and lng is not None:
            return ResolvedLocation(
                state=state or location.state or UNKNOWN,
                district=district or CURRENT_LOCATION,
                coordinates=[lng, lat],
            )

        if location.coordinates:
            return ResolvedLocation(
                state=location.state or UNKNOWN,
                district=location.district or UNKNOWN,
                coordinates=list(location.coordinates),
            )

        return self.default_location

    async def compute_climate_stress(
        self,
        farm: FarmContext,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        state: Optional[str] = None,
        district: Optional[str] = None,
        season: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ClimateStressResult:
        """
        Compute stress indicators and risk for a farm.

        This method orchestrates:
        1. Resolving the location
        2. Fetching weather through the provider fallback chain
        3. Calculating stress indicators
        4. Calculating flood and drought risk

        Args:
            farm: Farm attributes
            lat: Optional query latitude
            lng: Optional query longitude
            state: Optional query state
            district: Optional query district
            season: Optional season override
            today: Date used for calendar season resolution

        Returns:
            ClimateStressResult
        """
        location = self.resolve_location(farm, lat, lng, state, district)
        lon, lat = location.coordinates
        logger.info(f"Fetching climate data for: {location.district}, {location.state} ({lat}, {lon})")

        resolution = await self.orchestrator.resolve(lat, lon)

        stress = calculate_all_stress_indicators(resolution.snapshot, farm, season, today)
        calculated_at = datetime.now(timezone.utc)
        risk = calculate_risk_assessment(resolution.snapshot, farm, stress, calculated_at)

        return ClimateStressResult(
            stress_indicators=stress,
            risk_assessment=risk,
            weather_data=resolution.snapshot,
            season=stress.season,
            location=location,
            data_source=resolution.data_source,
            calculated_at=calculated_at,
            provider_insights=resolution.insights,
        )

    async def compute_risk_only(
        self,
        farm: FarmContext,
        today: Optional[date] = None,
    ) -> RiskOnlyResult:
        """
        Compute flood and drought risk at the farm's own location.

        Args:
            farm: Farm attributes; must include coordinates
            today: Date used for calendar season resolution

        Returns:
            RiskOnlyResult

        Raises:
            InvalidFarmContext: If the farm has no coordinates
        """
        if not farm.location.coordinates:
            raise InvalidFarmContext("Farm location coordinates are required for risk assessment")

        lon, lat = farm.location.coordinates
        resolution = await self.orchestrator.resolve(lat, lon)

        stress = calculate_all_stress_indicators(resolution.snapshot, farm, today=today)
        calculated_at = datetime.now(timezone.utc)
        risk = calculate_risk_assessment(resolution.snapshot, farm, stress, calculated_at)

        return RiskOnlyResult(
            risk_assessment=risk,
            location=ResolvedLocation(
                state=farm.location.state or UNKNOWN,
                district=farm.location.district or UNKNOWN,
                coordinates=list(farm.location.coordinates),
            ),
            calculated_at=calculated_at,
        )
