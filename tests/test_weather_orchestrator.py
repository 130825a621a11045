"""
Unit tests for weather source selection.

Tests cover:
- Primary provider success with insights
- Plausibility check and fallback to the secondary provider
- Synthetic fallback when every provider fails
- Malformed provider responses
- Provider lifecycle
"""
import pytest
import httpx
import respx
from datetime import datetime, timedelta, timezone

from agroclimate.domain.models import HourlyForecast, WeatherAlert
from agroclimate.infrastructure.weather_providers import (
    GoogleWeatherProvider,
    OpenMeteoProvider,
    ProviderUnavailable,
)
from agroclimate.services.application.weather_orchestrator import (
    SYNTHETIC_SOURCE,
    WeatherOrchestrator,
    has_plausible_conditions,
)
from tests.factories import make_snapshot


def hourly_series(hours: int):
    start = datetime(2024, 7, 1, tzinfo=timezone.utc)
    return [
        HourlyForecast(time=start + timedelta(hours=i), precipitation_probability=70)
        for i in range(hours)
    ]


class TestPlausibility:
    @pytest.mark.parametrize("temperature,humidity,plausible", [
        (31.0, 70.0, True),
        (0.0, 70.0, False),
        (31.0, 0.0, False),
        (-4.0, 70.0, False),
    ])
    def test_plausible_conditions(self, temperature, humidity, plausible):
        snapshot = make_snapshot(temperature=temperature, humidity=humidity)

        assert has_plausible_conditions(snapshot) is plausible


# ============================================================
# Fallback Chain Tests
# ============================================================

class TestWeatherOrchestrator:
    """Tests for the provider fallback chain."""

    @pytest.mark.asyncio
    async def test_primary_success(self, orchestrator, mock_primary, mock_secondary, sample_snapshot):
        """A plausible primary snapshot is used and the secondary is never called."""
        resolution = await orchestrator.resolve(26.24, 73.02)

        assert resolution.snapshot is sample_snapshot
        assert resolution.data_source == "Google Weather API"
        assert resolution.insights is not None
        mock_primary.fetch.assert_awaited_once_with(26.24, 73.02)
        mock_secondary.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_primary_insights_truncate_hourly(self, orchestrator, mock_primary):
        snapshot = make_snapshot()
        snapshot.hourly = hourly_series(48)
        snapshot.alerts = [WeatherAlert(severity="severe", event="Heavy Rain")]
        mock_primary.fetch.return_value = snapshot

        resolution = await orchestrator.resolve(26.24, 73.02)

        insights = resolution.insights
        assert len(insights.hourly_forecast) == 24
        assert insights.weather_alerts[0].event == "Heavy Rain"
        assert insights.analysis.precipitation.next_24h_rain_hours == 24

    @pytest.mark.asyncio
    async def test_zero_temperature_falls_back(self, orchestrator, mock_primary, mock_secondary):
        """Zero temperature from the primary counts as unusable."""
        mock_primary.fetch.return_value = make_snapshot(temperature=0.0)

        resolution = await orchestrator.resolve(26.24, 73.02)

        assert resolution.data_source == "Open-Meteo (Fallback)"
        assert resolution.snapshot.current.temperature == 29.0
        assert resolution.insights is None
        mock_secondary.fetch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_primary_error_falls_back(self, orchestrator, mock_primary, caplog):
        mock_primary.fetch.side_effect = ProviderUnavailable("Google Weather API", "timeout")

        resolution = await orchestrator.resolve(26.24, 73.02)

        assert resolution.data_source == "Open-Meteo (Fallback)"
        assert "Weather provider skipped" in caplog.text

    @pytest.mark.asyncio
    async def test_secondary_not_validated(self, orchestrator, mock_primary, mock_secondary):
        """Only the primary provider is held to the plausibility check."""
        mock_primary.fetch.side_effect = ProviderUnavailable("Google Weather API", "down")
        mock_secondary.fetch.return_value = make_snapshot(temperature=0.0, humidity=0.0)

        resolution = await orchestrator.resolve(26.24, 73.02)

        assert resolution.data_source == "Open-Meteo (Fallback)"

    @pytest.mark.asyncio
    async def test_all_providers_fail_uses_synthetic(self, mock_primary, mock_secondary):
        mock_primary.fetch.side_effect = ProviderUnavailable("Google Weather API", "down")
        mock_secondary.fetch.side_effect = ProviderUnavailable("Open-Meteo (Fallback)", "down")
        orchestrator = WeatherOrchestrator(mock_primary, mock_secondary)

        resolution = await orchestrator.resolve(26.24, 73.02)

        assert resolution.data_source == SYNTHETIC_SOURCE == "Synthetic (Fallback)"
        assert resolution.snapshot.current.temperature == 28
        assert len(resolution.snapshot.forecast) == 7
        assert resolution.insights is None

    @pytest.mark.asyncio
    async def test_custom_synthetic_factory(self, mock_primary, mock_secondary):
        fallback = make_snapshot(temperature=20.0)
        mock_primary.fetch.side_effect = ProviderUnavailable("Google Weather API", "down")
        mock_secondary.fetch.side_effect = ProviderUnavailable("Open-Meteo (Fallback)", "down")
        orchestrator = WeatherOrchestrator(
            mock_primary, mock_secondary, synthetic_factory=lambda: fallback
        )

        resolution = await orchestrator.resolve(26.24, 73.02)

        assert resolution.snapshot is fallback

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, orchestrator, mock_primary):
        """Only provider unavailability triggers fallback."""
        mock_primary.fetch.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await orchestrator.resolve(26.24, 73.02)

    @pytest.mark.asyncio
    async def test_close_closes_every_provider(self, orchestrator, mock_primary, mock_secondary):
        await orchestrator.close()

        mock_primary.close.assert_awaited_once()
        mock_secondary.close.assert_awaited_once()
        assert orchestrator.providers == [mock_primary, mock_secondary]


# ============================================================
# Malformed Provider Response Tests
# ============================================================

class TestMalformedProviderResponses:
    """Providers answering 200 with the wrong JSON shape."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_payloads_reach_synthetic_weather(self):
        respx.get(url__startswith="https://weather.test/v1/").mock(
            return_value=httpx.Response(200, json=[])
        )
        respx.get("https://open-meteo.test/v1/forecast").mock(
            return_value=httpx.Response(200, json=[])
        )
        orchestrator = WeatherOrchestrator(
            GoogleWeatherProvider(api_key="test-key", base_url="https://weather.test/v1"),
            OpenMeteoProvider(base_url="https://open-meteo.test/v1"),
        )

        resolution = await orchestrator.resolve(18.5, 73.8)
        await orchestrator.close()

        assert resolution.data_source == "Synthetic (Fallback)"
        assert len(resolution.snapshot.forecast) == 7
