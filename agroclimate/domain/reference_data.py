"""
Static agronomic reference data.

This module holds every threshold table and lookup list used by the stress
and risk calculators. Keeping them here lets the tables be reviewed and
updated without touching the scoring logic.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class Season(str, Enum):
    """Indian agricultural seasons."""
    KHARIF = "kharif"
    RABI = "rabi"
    SUMMER = "summer"
    ZAID = "zaid"


class LandType(str, Enum):
    IRRIGATED = "irrigated"
    RAINFED = "rainfed"
    MIXED = "mixed"


# ============================================================
# Season calendar
# ============================================================

# Month indices are 0-based (0 = January). Entries are checked in order and
# the first match wins, so summer is shadowed by rabi for months 2-4.
SEASON_CALENDAR: tuple[tuple[Season, frozenset[int]], ...] = (
    (Season.KHARIF, frozenset(range(5, 10))),
    (Season.RABI, frozenset({10, 11, 0, 1, 2, 3, 4})),
    (Season.SUMMER, frozenset({2, 3, 4})),
)

DEFAULT_SEASON = Season.KHARIF


# ============================================================
# Heat stress
# ============================================================

@dataclass(frozen=True)
class HeatThresholds:
    """Maximum-temperature cutoffs in °C, increasing."""
    optimal: float
    moderate: float
    severe: float
    extreme: float


SEASON_HEAT_THRESHOLDS = MappingProxyType({
    Season.KHARIF.value: HeatThresholds(optimal=30, moderate=35, severe=40, extreme=45),
    Season.RABI.value: HeatThresholds(optimal=25, moderate=30, severe=35, extreme=40),
    Season.SUMMER.value: HeatThresholds(optimal=35, moderate=38, severe=42, extreme=45),
    Season.ZAID.value: HeatThresholds(optimal=32, moderate=36, severe=40, extreme=44),
})


# ============================================================
# Soil moisture
# ============================================================

HUMIDITY_MOISTURE_WEIGHT = 0.4
RAINFALL_MOISTURE_WEIGHT = 0.6
REFERENCE_RAINFALL_MM = 50.0

LAND_TYPE_MOISTURE_FACTOR = MappingProxyType({
    LandType.IRRIGATED.value: 1.2,
    LandType.MIXED.value: 1.0,
    LandType.RAINFED.value: 0.8,
})

DEFAULT_MOISTURE_FACTOR = 1.0


# ============================================================
# Rainfall
# ============================================================

# Expected seasonal rainfall in mm, by season then state.
EXPECTED_RAINFALL_MM = MappingProxyType({
    Season.KHARIF.value: MappingProxyType({
        "default": 500,
        "Maharashtra": 600,
        "Punjab": 400,
        "Kerala": 800,
        "Rajasthan": 200,
    }),
    Season.RABI.value: MappingProxyType({
        "default": 100,
        "Punjab": 150,
        "Uttar Pradesh": 120,
        "Tamil Nadu": 300,
    }),
    Season.SUMMER.value: MappingProxyType({
        "default": 50,
    }),
    Season.ZAID.value: MappingProxyType({
        "default": 200,
    }),
})

GLOBAL_EXPECTED_RAINFALL_MM = 300


# ============================================================
# Regional risk membership
# ============================================================

FLOOD_PRONE_STATES = frozenset({
    "Assam", "Bihar", "Uttar Pradesh", "West Bengal",
    "Odisha", "Kerala", "Maharashtra", "Gujarat",
})

DROUGHT_PRONE_STATES = frozenset({
    "Rajasthan", "Gujarat", "Maharashtra", "Karnataka",
    "Andhra Pradesh", "Telangana", "Tamil Nadu", "Madhya Pradesh",
})


# ============================================================
# WMO weather codes
# ============================================================

WMO_WEATHER_CODES = MappingProxyType({
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    71: "Slight snow",
    73: "Moderate snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
})


def describe_weather_code(code) -> str:
    """Text for a WMO weather code, or "Unknown" when unmapped."""
    return WMO_WEATHER_CODES.get(code, "Unknown")
