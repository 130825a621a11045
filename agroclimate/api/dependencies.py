"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends, Request

from agroclimate.services.application.climate_service import ClimateService
from agroclimate.services.application.weather_orchestrator import WeatherOrchestrator


def get_weather_orchestrator(request: Request) -> WeatherOrchestrator:
    """
    Dependency factory for WeatherOrchestrator.

    The orchestrator and its provider clients are created in the application
    lifespan and live on app.state.

    Args:
        request: Incoming request

    Returns:
        WeatherOrchestrator instance
    """
    return request.app.state.weather_orchestrator


def get_climate_service(
    orchestrator: Annotated[WeatherOrchestrator, Depends(get_weather_orchestrator)],
) -> ClimateService:
    """
    Dependency factory for ClimateService.

    Args:
        orchestrator: Weather orchestrator (injected)

    Returns:
        ClimateService instance
    """
    return ClimateService(orchestrator=orchestrator)


# Type aliases for cleaner route signatures
ClimateServiceDep = Annotated[ClimateService, Depends(get_climate_service)]
