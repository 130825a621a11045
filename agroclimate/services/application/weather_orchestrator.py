"""
Application service: Weather source selection with fallback.

Tries providers in priority order and returns the first acceptable snapshot,
falling back to synthetic weather when every provider fails.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional, Sequence

from agroclimate.config import settings
from agroclimate.domain.exceptions import NoWeatherDataAvailable
from agroclimate.domain.models import (
    CamelModel,
    HourlyForecast,
    WeatherAlert,
    WeatherSnapshot,
)
from agroclimate.infrastructure.api_constants import APIConstants
from agroclimate.infrastructure.weather_providers import (
    ProviderUnavailable,
    WeatherProvider,
)
from agroclimate.services.domain.agronomic_insights import AgronomicAnalysis, analyze_weather
from agroclimate.services.domain.synthetic_weather import build_synthetic_snapshot

logger = logging.getLogger(__name__)

SYNTHETIC_SOURCE = "Synthetic (Fallback)"


class ProviderInsights(CamelModel):
    """Extra detail merged into responses when the primary provider answers."""
    hourly_forecast: List[HourlyForecast]
    weather_alerts: List[WeatherAlert]
    analysis: Optional[AgronomicAnalysis] = None


@dataclass(frozen=True)
class WeatherResolution:
    """Snapshot chosen for a request, with its provenance."""
    snapshot: WeatherSnapshot
    data_source: str
    insights: Optional[ProviderInsights] = None


def has_plausible_conditions(snapshot: WeatherSnapshot) -> bool:
    """Reject partially populated responses reporting zero temperature or humidity."""
    return snapshot.current.temperature > 0 and snapshot.current.humidity > 0


@dataclass(frozen=True)
class ProviderAttempt:
    """One step of the fallback chain."""
    provider: WeatherProvider
    validate: Optional[Callable[[WeatherSnapshot], bool]] = None
    enrich: bool = False


class WeatherOrchestrator:
    """
    Resolves weather for a location through an ordered provider chain.

    Providers are called one at a time; a provider is only consulted when
    every higher-priority one failed or returned implausible data.
    """

    def __init__(
        self,
        primary: WeatherProvider,
        secondary: WeatherProvider,
        synthetic_factory: Optional[Callable[[], WeatherSnapshot]] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            primary: Rich provider; its results must pass the plausibility check
            secondary: Free fallback provider
            synthetic_factory: Builds the last-resort snapshot
        """
        self.attempts: Sequence[ProviderAttempt] = (
            ProviderAttempt(primary, validate=has_plausible_conditions, enrich=True),
            ProviderAttempt(secondary),
        )
        self.synthetic_factory = synthetic_factory or (
            lambda: build_synthetic_snapshot(
                today=date.today(), seed=settings.synthetic_weather_seed
            )
        )

    @property
    def providers(self) -> List[WeatherProvider]:
        return [attempt.provider for attempt in self.attempts]

    async def resolve(self, lat: float, lon: float) -> WeatherResolution:
        """
        Get weather for a location.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees

        Returns:
            WeatherResolution; never raises for lack of data
        """
        for attempt in self.attempts:
            provider = attempt.provider
            try:
                snapshot = await provider.fetch(lat, lon)
                if attempt.validate and not attempt.validate(snapshot):
                    raise ProviderUnavailable(
                        provider.name,
                        f"implausible conditions (temperature={snapshot.current.temperature}, "
                        f"humidity={snapshot.current.humidity})",
                    )
            except ProviderUnavailable as e:
                logger.warning(f"Weather provider skipped: {e}")
                continue

            logger.info(f"Weather for ({lat}, {lon}) served by {provider.name}")
            insights = self._build_insights(snapshot) if attempt.enrich else None
            return WeatherResolution(snapshot, provider.name, insights)

        error = NoWeatherDataAvailable(f"No weather provider answered for ({lat}, {lon})")
        logger.warning(f"{error}; using synthetic weather")
        return WeatherResolution(self.synthetic_factory(), SYNTHETIC_SOURCE)

    @staticmethod
    def _build_insights(snapshot: WeatherSnapshot) -> ProviderInsights:
        return ProviderInsights(
            hourly_forecast=snapshot.hourly[:APIConstants.HOURLY_INSIGHT_LIMIT],
            weather_alerts=snapshot.alerts,
            analysis=analyze_weather(snapshot),
        )

    async def close(self):
        """Close every provider's HTTP client."""
        for provider in self.providers:
            await provider.close()
