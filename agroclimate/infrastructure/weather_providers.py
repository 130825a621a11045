"""
Infrastructure layer: Weather provider clients with retry logic.

Each provider fetches a location's weather and normalizes it into a
WeatherSnapshot. Any failure (transport, HTTP status, malformed payload,
missing credentials) surfaces as ProviderUnavailable so callers can move on
to the next provider.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from agroclimate.config import settings
from agroclimate.domain.models import (
    CurrentConditions,
    DailyForecast,
    HourlyForecast,
    WeatherAlert,
    WeatherSnapshot,
)
from agroclimate.domain.reference_data import describe_weather_code
from agroclimate.infrastructure.api_constants import (
    APIConstants,
    GoogleWeatherEndpoints,
    OpenMeteoEndpoints,
)

logger = logging.getLogger(__name__)

# Payload problems that mean "this provider gave us nothing usable".
MALFORMED_PAYLOAD_ERRORS = (KeyError, IndexError, TypeError, ValueError, AttributeError)


class ProviderUnavailable(Exception):
    """A weather provider failed or returned unusable data."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


def _measure(node: Any, *path: str, default: float = 0.0) -> float:
    """
    Read a numeric measurement from a nested payload.

    Leaves may be plain numbers or objects carrying "value" or "degrees".
    Missing, null and zero readings all yield the default.
    """
    for key in path:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
    if isinstance(node, dict):
        node = node.get("value", node.get("degrees"))
    if isinstance(node, (int, float)) and not isinstance(node, bool) and node:
        return float(node)
    return default


def _condition_text(node: Any) -> str:
    if isinstance(node, dict):
        description = node.get("description")
        if isinstance(description, dict) and description.get("text"):
            return description["text"]
        return node.get("type") or "Unknown"
    return node or "Unknown"


def _parse_date(node: Any) -> date:
    if isinstance(node, dict):
        return date(node["year"], node["month"], node["day"])
    return date.fromisoformat(str(node)[:10])


def _parse_datetime(node: Any) -> Optional[datetime]:
    if not node:
        return None
    return datetime.fromisoformat(str(node).replace("Z", "+00:00"))


class WeatherProvider(ABC):
    """
    Base class for weather providers.

    Owns an httpx.AsyncClient and implements retry logic with exponential
    backoff for transport errors and 5xx responses.
    """

    name: str = "weather provider"

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the provider.

        Args:
            base_url: API base URL
            timeout: Request timeout in seconds
            client: Pre-built HTTP client (tests inject one)
        """
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            headers={"accept": APIConstants.CONTENT_TYPE_JSON},
            timeout=timeout or settings.provider_timeout,
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @retry(
        stop=stop_after_attempt(settings.max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.RequestError)),
        reraise=True,
    )
    async def _make_request(
        self,
        endpoint: str,
        params: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Make a GET request with retry logic.

        Args:
            endpoint: API endpoint path
            params: Query parameters

        Returns:
            Response data as dictionary

        Raises:
            ProviderUnavailable: On 4xx responses (not retried) or a non-object body
            httpx.HTTPError: On 5xx or transport errors after retries
        """
        try:
            response = await self.client.get(endpoint, params=params)
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                raise ProviderUnavailable(
                    self.name, f"malformed response: expected a JSON object, got {type(data).__name__}"
                )
            return data
        except httpx.HTTPStatusError as e:
            # Retry on server errors (5xx)
            if e.response.status_code >= 500:
                raise
            # Don't retry on client errors (4xx)
            raise ProviderUnavailable(
                self.name,
                f"request failed: {e.response.status_code} - {e.response.text}",
            )

    async def fetch(self, lat: float, lon: float) -> WeatherSnapshot:
        """
        Fetch and normalize weather for a location.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees

        Returns:
            WeatherSnapshot

        Raises:
            ProviderUnavailable: If the provider cannot supply usable data
        """
        try:
            return await self._fetch(lat, lon)
        except ProviderUnavailable:
            raise
        except httpx.HTTPError as e:
            raise ProviderUnavailable(self.name, f"request error: {e}") from e
        except MALFORMED_PAYLOAD_ERRORS as e:
            raise ProviderUnavailable(self.name, f"malformed response: {e!r}") from e

    @abstractmethod
    async def _fetch(self, lat: float, lon: float) -> WeatherSnapshot:
        """Provider-specific fetch and normalization."""


class GoogleWeatherProvider(WeatherProvider):
    """
    Primary provider backed by the Google Weather API.

    Supplies current conditions, a daily forecast, an hourly forecast and
    public alerts. Requires an API key.
    """

    name = "Google Weather API"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        forecast_days: Optional[int] = None,
        hourly_hours: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            base_url=base_url or settings.google_weather_base_url,
            timeout=timeout,
            client=client,
        )
        self.api_key = settings.google_weather_api_key if api_key is None else api_key
        self.forecast_days = forecast_days or settings.forecast_days
        self.hourly_hours = hourly_hours or settings.hourly_forecast_hours

    async def _lookup(
        self,
        endpoint: str,
        lat: float,
        lon: float,
        **params,
    ) -> Dict[str, Any]:
        query = {"key": self.api_key, **GoogleWeatherEndpoints.location_params(lat, lon)}
        query.update(params)
        return await self._make_request(endpoint, query)

    async def _optional(self, label: str, call):
        """Await a secondary lookup, logging and returning None on failure."""
        try:
            return await call
        except (ProviderUnavailable, httpx.HTTPError, *MALFORMED_PAYLOAD_ERRORS) as e:
            logger.warning(f"{self.name} {label} lookup failed: {e}")
            return None

    async def get_current_conditions(self, lat: float, lon: float) -> CurrentConditions:
        data = await self._lookup(GoogleWeatherEndpoints.CURRENT_CONDITIONS, lat, lon)
        temperature = _measure(data, "temperature")
        visibility_m = _measure(data, "visibility", default=APIConstants.DEFAULT_VISIBILITY_KM * 1000)
        return CurrentConditions(
            temperature=temperature,
            feels_like=temperature,
            temp_min=temperature - APIConstants.GOOGLE_TEMP_SPREAD,
            temp_max=temperature + APIConstants.GOOGLE_TEMP_SPREAD,
            humidity=_measure(data, "relativeHumidity"),
            pressure=_measure(data, "pressure", default=APIConstants.DEFAULT_PRESSURE_HPA),
            wind_speed=_measure(data, "windSpeed"),
            wind_direction=_measure(data, "windDirection"),
            cloud_cover=_measure(data, "cloudCover"),
            precipitation=0.0,
            uv_index=_measure(data, "uvIndex"),
            visibility=visibility_m / 1000,
            description=_condition_text(data.get("weatherConditions")),
            observed_at=datetime.now(timezone.utc),
        )

    async def get_daily_forecast(
        self,
        lat: float,
        lon: float,
        days: Optional[int] = None,
    ) -> List[DailyForecast]:
        days = min(days or self.forecast_days, GoogleWeatherEndpoints.MAX_FORECAST_DAYS)
        data = await self._lookup(GoogleWeatherEndpoints.DAILY_FORECAST, lat, lon, days=days)

        forecast = []
        for day in data.get("dailyForecasts") or []:
            temp_max = _measure(day, "temperature", "max")
            temp_min = _measure(day, "temperature", "min")
            forecast.append(DailyForecast(
                date=_parse_date(day["date"]),
                temp=(temp_max + temp_min) / 2,
                temp_min=temp_min,
                temp_max=temp_max,
                humidity=_measure(day, "relativeHumidity"),
                rainfall=_measure(day, "precipitationAmount"),
                precipitation_probability=_measure(day, "precipitationProbability"),
                wind_speed=_measure(day, "windSpeed", "max"),
                uv_index=_measure(day, "uvIndex", "max"),
                conditions=_condition_text(day.get("weatherConditions")),
            ))
        return sorted(forecast, key=lambda entry: entry.date)

    async def get_hourly_forecast(
        self,
        lat: float,
        lon: float,
        hours: Optional[int] = None,
    ) -> List[HourlyForecast]:
        hours = min(hours or self.hourly_hours, GoogleWeatherEndpoints.MAX_FORECAST_HOURS)
        data = await self._lookup(GoogleWeatherEndpoints.HOURLY_FORECAST, lat, lon, hours=hours)
        return [
            HourlyForecast(
                time=_parse_datetime(hour["time"]),
                temperature=_measure(hour, "temperature"),
                precipitation_probability=_measure(hour, "precipitationProbability"),
                humidity=_measure(hour, "relativeHumidity"),
                wind_speed=_measure(hour, "windSpeed"),
                condition=_condition_text(hour.get("weatherConditions")),
            )
            for hour in data.get("hourlyForecasts") or []
        ]

    async def get_weather_alerts(
        self,
        lat: float,
        lon: float,
        language_code: str = "en",
    ) -> List[WeatherAlert]:
        data = await self._lookup(
            GoogleWeatherEndpoints.PUBLIC_ALERTS, lat, lon, languageCode=language_code
        )
        return [
            WeatherAlert(
                severity=alert.get("severity") or "unknown",
                urgency=alert.get("urgency") or "unknown",
                event=alert.get("event") or "Unknown Event",
                headline=alert.get("headline") or "",
                description=alert.get("description") or "",
                instruction=alert.get("instruction") or "",
                areas=alert.get("areas") or [],
                start_time=_parse_datetime(alert.get("startTime")),
                end_time=_parse_datetime(alert.get("endTime")),
            )
            for alert in data.get("alerts") or []
        ]

    async def _fetch(self, lat: float, lon: float) -> WeatherSnapshot:
        if not self.api_key:
            raise ProviderUnavailable(self.name, "API key not configured")

        current, daily, hourly, alerts = await asyncio.gather(
            self._optional("current conditions", self.get_current_conditions(lat, lon)),
            self._optional("daily forecast", self.get_daily_forecast(lat, lon)),
            self._optional("hourly forecast", self.get_hourly_forecast(lat, lon)),
            self._optional("alerts", self.get_weather_alerts(lat, lon)),
        )

        if not daily:
            raise ProviderUnavailable(self.name, "no daily forecast returned")

        return WeatherSnapshot(
            # Zeroed conditions fail the orchestrator's plausibility check.
            current=current or CurrentConditions(),
            forecast=daily,
            hourly=hourly or [],
            alerts=alerts or [],
        )


class OpenMeteoProvider(WeatherProvider):
    """
    Secondary provider backed by Open-Meteo (free, no credentials).

    Supplies current conditions and a daily forecast; weather codes are
    translated through the WMO table.
    """

    name = "Open-Meteo (Fallback)"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        forecast_days: Optional[int] = None,
        timezone_name: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            base_url=base_url or settings.open_meteo_base_url,
            timeout=timeout,
            client=client,
        )
        self.forecast_days = forecast_days or settings.forecast_days
        self.timezone_name = timezone_name or settings.open_meteo_timezone

    async def get_current_weather(self, lat: float, lon: float) -> CurrentConditions:
        data = await self._make_request(OpenMeteoEndpoints.FORECAST, {
            "latitude": lat,
            "longitude": lon,
            "current": ",".join(OpenMeteoEndpoints.CURRENT_VARIABLES),
            "hourly": "uv_index",
            "timezone": self.timezone_name,
            "forecast_days": 1,
        })
        current = data["current"]
        observed_at = _parse_datetime(current.get("time"))

        # UV index is only published hourly; take the reading for the observation hour.
        uv_series = (data.get("hourly") or {}).get("uv_index") or []
        hour = observed_at.hour if observed_at else 0
        uv_index = uv_series[hour] if hour < len(uv_series) else None

        temperature = current["temperature_2m"]
        weather_code = current.get("weather_code")
        return CurrentConditions(
            temperature=temperature,
            feels_like=current.get("apparent_temperature") or temperature,
            temp_min=temperature - APIConstants.OPEN_METEO_TEMP_SPREAD,
            temp_max=temperature + APIConstants.OPEN_METEO_TEMP_SPREAD,
            humidity=current.get("relative_humidity_2m") or 0,
            pressure=(
                current.get("pressure_msl")
                or current.get("surface_pressure")
                or APIConstants.DEFAULT_PRESSURE_HPA
            ),
            wind_speed=current.get("wind_speed_10m") or 0,
            wind_direction=current.get("wind_direction_10m") or 0,
            cloud_cover=current.get("cloud_cover") or 0,
            precipitation=current.get("precipitation") or current.get("rain") or 0,
            uv_index=uv_index or 0,
            visibility=APIConstants.DEFAULT_VISIBILITY_KM,
            weather_code=weather_code,
            description=describe_weather_code(weather_code),
            observed_at=observed_at,
        )

    async def get_forecast(self, lat: float, lon: float) -> List[DailyForecast]:
        data = await self._make_request(OpenMeteoEndpoints.FORECAST, {
            "latitude": lat,
            "longitude": lon,
            "daily": ",".join(OpenMeteoEndpoints.DAILY_VARIABLES),
            "timezone": self.timezone_name,
            "forecast_days": self.forecast_days,
        })
        daily = data["daily"]

        def series(name: str) -> list:
            return daily.get(name) or [None] * len(daily["time"])

        humidity = series("relative_humidity_2m_mean")
        rainfall = series("precipitation_sum")
        probability = series("precipitation_probability_max")
        wind = series("wind_speed_10m_max")
        uv = series("uv_index_max")
        codes = series("weather_code")

        forecast = []
        for i in range(min(self.forecast_days, len(daily["time"]))):
            temp_max = daily["temperature_2m_max"][i]
            temp_min = daily["temperature_2m_min"][i]
            forecast.append(DailyForecast(
                date=_parse_date(daily["time"][i]),
                temp=(temp_max + temp_min) / 2,
                temp_min=temp_min,
                temp_max=temp_max,
                humidity=humidity[i] or APIConstants.DEFAULT_DAILY_HUMIDITY,
                rainfall=rainfall[i] or 0,
                precipitation_probability=probability[i] or 0,
                wind_speed=wind[i] or 0,
                uv_index=uv[i] or 0,
                conditions=describe_weather_code(codes[i]),
                weather_code=codes[i],
            ))
        return sorted(forecast, key=lambda entry: entry.date)

    async def _fetch(self, lat: float, lon: float) -> WeatherSnapshot:
        current, forecast = await asyncio.gather(
            self.get_current_weather(lat, lon),
            self.get_forecast(lat, lon),
        )
        if not forecast:
            raise ProviderUnavailable(self.name, "no daily forecast returned")
        return WeatherSnapshot(current=current, forecast=forecast)


def build_weather_providers() -> tuple[GoogleWeatherProvider, OpenMeteoProvider]:
    """
    Create the primary and secondary providers from settings.

    Returns:
        (primary, secondary) provider pair; the caller owns their lifecycle
    """
    return GoogleWeatherProvider(), OpenMeteoProvider()
