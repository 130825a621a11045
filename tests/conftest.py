"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample weather snapshots
- Sample farm contexts
- Mock weather providers
- FastAPI test client
"""
import pytest
from typing import Iterator
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from agroclimate.main import app
from agroclimate.api.dependencies import get_weather_orchestrator
from agroclimate.domain.models import FarmContext, FarmLocation, WeatherSnapshot
from agroclimate.infrastructure.weather_providers import (
    GoogleWeatherProvider,
    OpenMeteoProvider,
)
from agroclimate.services.application.weather_orchestrator import WeatherOrchestrator
from tests.factories import make_snapshot


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def sample_snapshot() -> WeatherSnapshot:
    """Typical monsoon week with 20mm of forecast rain."""
    return make_snapshot()


@pytest.fixture
def rainfed_farm() -> FarmContext:
    """Rainfed farm in a drought-prone state with no irrigation."""
    return FarmContext(
        location=FarmLocation(
            state="Rajasthan",
            district="Jodhpur",
            coordinates=[73.0243, 26.2389],
        ),
        land_type="rainfed",
        soil_type="desert",
        water_source=[],
    )


@pytest.fixture
def irrigated_farm() -> FarmContext:
    """Irrigated farm in Punjab with a borewell."""
    return FarmContext(
        location=FarmLocation(
            state="Punjab",
            district="Ludhiana",
            coordinates=[75.8573, 30.9010],
        ),
        land_type="irrigated",
        soil_type="alluvial",
        water_source=["borewell"],
    )


@pytest.fixture
def farm_without_location() -> FarmContext:
    """Farm registered without a location."""
    return FarmContext(land_type="mixed", soil_type="black")


# ============================================================
# Mock Provider Fixtures
# ============================================================

@pytest.fixture
def mock_primary(sample_snapshot):
    """Mock primary provider returning the sample snapshot."""
    provider = AsyncMock(spec=GoogleWeatherProvider)
    provider.name = GoogleWeatherProvider.name
    provider.fetch.return_value = sample_snapshot
    return provider


@pytest.fixture
def mock_secondary():
    """Mock secondary provider returning a drier snapshot."""
    provider = AsyncMock(spec=OpenMeteoProvider)
    provider.name = OpenMeteoProvider.name
    provider.fetch.return_value = make_snapshot(
        temperature=29.0, temp_max=32.0, humidity=55.0, daily_rainfall=[0.0] * 7
    )
    return provider


@pytest.fixture
def orchestrator(mock_primary, mock_secondary) -> WeatherOrchestrator:
    """Orchestrator wired to the mock providers."""
    return WeatherOrchestrator(primary=mock_primary, secondary=mock_secondary)


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client(orchestrator) -> Iterator[TestClient]:
    """Test client with the mock orchestrator injected."""
    app.dependency_overrides[get_weather_orchestrator] = lambda: orchestrator
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
