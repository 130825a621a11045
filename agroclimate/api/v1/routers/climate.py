"""
API router for climate stress and risk endpoints.
"""
from datetime import date
from typing import Annotated, Optional

from fastapi import APIRouter, Query, Request

from agroclimate.api.dependencies import ClimateServiceDep
from agroclimate.api.rate_limit import DEFAULT_RATE_LIMIT, limiter
from agroclimate.api.v1.models.responses import CurrentSeasonResponse, ErrorResponse
from agroclimate.domain.models import FarmContext
from agroclimate.services.application.climate_service import (
    ClimateStressResult,
    RiskOnlyResult,
)
from agroclimate.services.domain.stress_calculator import current_season


router = APIRouter(
    prefix="/climate",
    tags=["climate"],
)


@router.post(
    "/stress",
    response_model=ClimateStressResult,
    summary="Get climate stress indicators",
    description="""
    Compute heat stress, soil moisture stress and rainfall irregularity for a
    farm, together with flood and drought risk.

    Location precedence:
    1. `lat` and `lng` query parameters (both required)
    2. The farm's own coordinates
    3. The configured default location

    Weather comes from the primary provider when it returns plausible data,
    otherwise from the free fallback provider, otherwise from a synthetic
    series. `dataSource` names the source that was used.
    """,
    responses={
        200: {"description": "Stress indicators and risk assessment"},
        422: {"description": "Invalid farm context or query parameters"},
    },
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def get_climate_stress(
    request: Request,
    farm: FarmContext,
    climate_service: ClimateServiceDep,
    lat: Annotated[Optional[float], Query(ge=-90, le=90, description="Latitude override")] = None,
    lng: Annotated[Optional[float], Query(ge=-180, le=180, description="Longitude override")] = None,
    state: Annotated[Optional[str], Query(description="State name for the override location")] = None,
    district: Annotated[Optional[str], Query(description="District name for the override location")] = None,
    season: Annotated[Optional[str], Query(description="Season override (kharif, rabi, summer, zaid)")] = None,
) -> ClimateStressResult:
    """
    Get climate stress indicators for a farm.

    Args:
        request: Incoming request (used by the rate limiter)
        farm: Farm attributes
        climate_service: Climate service (injected dependency)
        lat: Optional latitude override
        lng: Optional longitude override
        state: Optional state for the override location
        district: Optional district for the override location
        season: Optional season override

    Returns:
        ClimateStressResult
    """
    # Delegate to service layer (no business logic here)
    return await climate_service.compute_climate_stress(
        farm,
        lat=lat,
        lng=lng,
        state=state,
        district=district,
        season=season,
    )


@router.post(
    "/risk",
    response_model=RiskOnlyResult,
    summary="Get flood and drought risk",
    description="""
    Compute flood and drought risk probabilities at the farm's own location.
    The farm must include coordinates.
    """,
    responses={
        200: {"description": "Risk assessment"},
        422: {"description": "Farm has no coordinates", "model": ErrorResponse},
    },
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def get_climate_risk(
    request: Request,
    farm: FarmContext,
    climate_service: ClimateServiceDep,
) -> RiskOnlyResult:
    """
    Get flood and drought risk for a farm.

    A farm without coordinates raises InvalidFarmContext, which the error
    handler middleware turns into a 422 response.
    """
    return await climate_service.compute_risk_only(farm)


@router.get(
    "/seasons/current",
    response_model=CurrentSeasonResponse,
    summary="Get the current agricultural season",
)
async def get_current_season() -> CurrentSeasonResponse:
    today = date.today()
    return CurrentSeasonResponse(season=current_season(today), month=today.month - 1)
