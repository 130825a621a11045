"""
API endpoint constants and configuration.

This module contains all weather provider endpoint paths and related
constants. Centralizing these values makes it easy to swap out endpoints or
update API versions.
"""


# Google Weather API Endpoints
class GoogleWeatherEndpoints:
    """Google Weather API endpoint paths."""

    CURRENT_CONDITIONS = "/currentConditions:lookup"
    DAILY_FORECAST = "/forecast/days:lookup"
    HOURLY_FORECAST = "/forecast/hours:lookup"
    PUBLIC_ALERTS = "/publicAlerts:lookup"

    MAX_FORECAST_DAYS = 15
    MAX_FORECAST_HOURS = 120

    @staticmethod
    def location_params(lat: float, lon: float) -> dict:
        """
        Query parameters locating a point.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees

        Returns:
            Parameter dictionary
        """
        return {"location.latitude": lat, "location.longitude": lon}


# Open-Meteo API Endpoints
class OpenMeteoEndpoints:
    """Open-Meteo API endpoint paths and requested variables."""

    FORECAST = "/forecast"

    CURRENT_VARIABLES = (
        "temperature_2m",
        "relative_humidity_2m",
        "apparent_temperature",
        "precipitation",
        "rain",
        "weather_code",
        "cloud_cover",
        "pressure_msl",
        "surface_pressure",
        "wind_speed_10m",
        "wind_direction_10m",
        "wind_gusts_10m",
    )

    DAILY_VARIABLES = (
        "temperature_2m_max",
        "temperature_2m_min",
        "precipitation_sum",
        "precipitation_probability_max",
        "relative_humidity_2m_mean",
        "weather_code",
        "wind_speed_10m_max",
        "uv_index_max",
    )


# API Configuration Constants
class APIConstants:
    """General API configuration constants."""

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"

    # Defaults for fields providers may omit
    DEFAULT_PRESSURE_HPA = 1013.0
    DEFAULT_VISIBILITY_KM = 10.0
    DEFAULT_DAILY_HUMIDITY = 50.0

    # Derived daily range around a point temperature
    GOOGLE_TEMP_SPREAD = 5.0
    OPEN_METEO_TEMP_SPREAD = 3.0

    # Hourly entries merged into responses
    HOURLY_INSIGHT_LIMIT = 24
