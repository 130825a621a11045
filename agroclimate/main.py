"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from agroclimate.config import settings
from agroclimate.api.rate_limit import limiter
from agroclimate.api.v1.routers import climate
from agroclimate.infrastructure.weather_providers import build_weather_providers
from agroclimate.middleware.error_handler import ErrorHandlerMiddleware
from agroclimate.services.application.weather_orchestrator import WeatherOrchestrator

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Builds the weather providers on startup and closes their HTTP clients
    on shutdown.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    primary, secondary = build_weather_providers()
    if not primary.api_key:
        logger.warning("Google Weather API key not set; Open-Meteo will serve weather")
    app.state.weather_orchestrator = WeatherOrchestrator(primary, secondary)
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await app.state.weather_orchestrator.close()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Climate Stress & Risk Assessment API for farm advisory

    Turns weather observations and forecasts into agronomic stress indices
    and flood/drought risk probabilities for a farm.

    ## Features

    - **Stress Indices**: Heat stress, soil moisture stress and rainfall
      irregularity on a 0-100 scale
    - **Risk Probabilities**: Flood and drought risk with the factors that
      contributed to each score
    - **Resilient Weather Data**: Primary provider, free fallback provider and
      a synthetic series as last resort
    - **Rate Limiting**: Protects the API from abuse

    ## Weather source selection

    1. Google Weather API, accepted only with non-zero temperature and humidity
    2. Open-Meteo
    3. Synthetic typical conditions
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(climate.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
