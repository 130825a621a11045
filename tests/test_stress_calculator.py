"""
Unit tests for climate stress indices.

Tests cover:
- Heat stress breakpoints and monotonicity
- Soil moisture estimation and bounds
- Rainfall irregularity bands and lookups
- Season resolution
- Combined indicator calculation
"""
import pytest
from datetime import date

from agroclimate.domain.models import FarmContext, FarmLocation
from agroclimate.domain.reference_data import SEASON_HEAT_THRESHOLDS
from agroclimate.services.domain.stress_calculator import (
    calculate_all_stress_indicators,
    calculate_heat_stress,
    calculate_rainfall_irregularity,
    calculate_soil_moisture_stress,
    current_season,
    expected_seasonal_rainfall,
    resolve_season,
    season_for_month,
)
from tests.factories import make_snapshot


LEVEL_ORDER = {"low": 0, "medium": 1, "high": 2, "extreme": 3}


# ============================================================
# Heat Stress Tests
# ============================================================

class TestHeatStress:
    """Tests for the heat stress step function."""

    def test_extreme_heat_in_kharif(self):
        """46°C in kharif is extreme heat."""
        result = calculate_heat_stress(40.0, 46.0, "kharif")

        assert result.value == 100
        assert result.level == "extreme"
        assert result.max_temp == 46.0
        assert result.temperature == 40.0
        assert result.threshold == 30

    @pytest.mark.parametrize("max_temp,value,level", [
        (45.0, 100, "extreme"),
        (44.9, 80, "high"),
        (40.0, 80, "high"),
        (39.9, 50, "medium"),
        (35.0, 50, "medium"),
        (34.9, 25, "low"),
        (30.0, 25, "low"),
        (29.9, 0, "low"),
    ])
    def test_kharif_breakpoints(self, max_temp, value, level):
        """Each kharif cutoff is inclusive and selects the highest band."""
        result = calculate_heat_stress(max_temp, max_temp, "kharif")

        assert (result.value, result.level) == (value, level)

    @pytest.mark.parametrize("season,max_temp,level", [
        ("rabi", 40.0, "extreme"),
        ("rabi", 35.0, "high"),
        ("summer", 42.0, "high"),
        ("summer", 41.9, "medium"),
        ("zaid", 44.0, "extreme"),
        ("zaid", 36.0, "medium"),
    ])
    def test_season_profiles(self, season, max_temp, level):
        """Each season uses its own thresholds."""
        assert calculate_heat_stress(30.0, max_temp, season).level == level

    def test_unknown_season_uses_kharif_profile(self):
        """Unrecognized seasons fall back to the kharif thresholds."""
        unknown = calculate_heat_stress(30.0, 41.0, "monsoon")
        kharif = calculate_heat_stress(30.0, 41.0, "kharif")

        assert unknown.value == kharif.value
        assert unknown.threshold == kharif.threshold

    @pytest.mark.parametrize("season", list(SEASON_HEAT_THRESHOLDS))
    def test_level_monotonic_in_max_temp(self, season):
        """Heat level never decreases as maximum temperature rises."""
        temps = [t / 2 for t in range(0, 120)]
        levels = [LEVEL_ORDER[calculate_heat_stress(t, t, season).level] for t in temps]
        values = [calculate_heat_stress(t, t, season).value for t in temps]

        assert levels == sorted(levels)
        assert values == sorted(values)


# ============================================================
# Soil Moisture Tests
# ============================================================

class TestSoilMoistureStress:
    """Tests for soil moisture stress estimation."""

    def test_rainfed_farm_moisture(self):
        """70% humidity and 20mm rain on rainfed land is severe stress."""
        # (0.4 * 70 + 0.6 * 0.4 * 100) * 0.8 = 41.6
        result = calculate_soil_moisture_stress(70, 20, "rainfed")

        assert result.estimated_moisture == 42
        assert result.value == 58
        assert result.level == "severe"

    def test_irrigated_farm_moisture(self):
        """Irrigation scales moisture up by 1.2."""
        # 52 * 1.2 = 62.4
        result = calculate_soil_moisture_stress(70, 20, "irrigated")

        assert result.estimated_moisture == 62
        assert result.value == 38
        assert result.level == "moderate"

    def test_unknown_land_type_is_neutral(self):
        """Unknown land types use a factor of 1.0, same as mixed."""
        unknown = calculate_soil_moisture_stress(70, 20, "terraced")
        mixed = calculate_soil_moisture_stress(70, 20, "mixed")
        missing = calculate_soil_moisture_stress(70, 20, None)

        assert unknown == mixed == missing
        assert unknown.value == 48

    def test_rainfall_saturates_at_reference(self):
        """Rainfall beyond 50mm adds no more moisture."""
        at_reference = calculate_soil_moisture_stress(50, 50, "mixed")
        beyond = calculate_soil_moisture_stress(50, 400, "mixed")

        assert at_reference == beyond

    def test_saturated_irrigated_soil_is_adequate(self):
        """Moisture above 100 clamps stress at zero."""
        result = calculate_soil_moisture_stress(100, 100, "irrigated")

        assert result.value == 0
        assert result.level == "adequate"
        assert result.estimated_moisture == 120

    def test_dry_rainfed_soil_is_critical(self):
        result = calculate_soil_moisture_stress(20, 0, "rainfed")

        assert result.level == "critical"
        assert result.value == 94

    @pytest.mark.parametrize("land_type", ["irrigated", "rainfed", "mixed", None])
    @pytest.mark.parametrize("humidity", [0, 35, 100])
    @pytest.mark.parametrize("rainfall", [-20, 0, 25, 500])
    def test_stress_within_bounds(self, land_type, humidity, rainfall):
        """Stress value stays within [0, 100]."""
        result = calculate_soil_moisture_stress(humidity, rainfall, land_type)

        assert 0 <= result.value <= 100


# ============================================================
# Rainfall Irregularity Tests
# ============================================================

class TestRainfallIrregularity:
    """Tests for rainfall irregularity scoring."""

    def test_zero_deviation_is_normal(self):
        """Rainfall matching expectations scores 10, normal."""
        result = calculate_rainfall_irregularity(600, "Maharashtra", "kharif")

        assert result.deviation == 0
        assert result.value == 10
        assert result.level == "normal"
        assert result.expected_rainfall == 600

    @pytest.mark.parametrize("actual,value,level,deviation", [
        (540, 10, "normal", 8),
        (450, 30, "normal", -10),
        (600, 30, "normal", 20),
        (375, 60, "irregular", -25),
        (740, 60, "irregular", 48),
        (250, 100, "highly-irregular", -50),
        (1000, 100, "highly-irregular", 100),
    ])
    def test_deviation_bands(self, actual, value, level, deviation):
        """Kharif default expectation is 500mm."""
        result = calculate_rainfall_irregularity(actual, "Haryana", "kharif")

        assert result.expected_rainfall == 500
        assert (result.value, result.level, result.deviation) == (value, level, deviation)

    def test_moderate_deviation_keeps_normal_level(self):
        """A 10-25% deviation scores 30 but stays at level normal."""
        result = calculate_rainfall_irregularity(58, None, "summer")

        assert result.deviation == 16
        assert result.value == 30
        assert result.level == "normal"

    def test_explicit_expected_rainfall_overrides_table(self):
        result = calculate_rainfall_irregularity(100, "Kerala", "kharif", expected_rainfall=100)

        assert result.expected_rainfall == 100
        assert result.deviation == 0

    @pytest.mark.parametrize("season,state,expected", [
        ("kharif", "Kerala", 800),
        ("kharif", "Assam", 500),
        ("rabi", "Tamil Nadu", 300),
        ("rabi", None, 100),
        ("summer", "Punjab", 50),
        ("zaid", "Bihar", 200),
        ("monsoon", "Kerala", 300),
    ])
    def test_expected_rainfall_lookup(self, season, state, expected):
        """Lookup falls back to season default, then the global default."""
        assert expected_seasonal_rainfall(season, state) == expected


# ============================================================
# Season Resolution Tests
# ============================================================

class TestSeasonResolution:
    """Tests for season calendar and overrides."""

    @pytest.mark.parametrize("month,season", [
        (0, "rabi"),
        (1, "rabi"),
        (2, "rabi"),
        (3, "rabi"),
        (4, "rabi"),
        (5, "kharif"),
        (6, "kharif"),
        (9, "kharif"),
        (10, "rabi"),
        (11, "rabi"),
    ])
    def test_season_for_month(self, month, season):
        """Kharif is checked before rabi, and rabi before summer."""
        assert season_for_month(month) == season

    def test_out_of_range_month_defaults_to_kharif(self):
        assert season_for_month(12) == "kharif"

    def test_current_season_uses_zero_based_month(self):
        """July is month index 6."""
        assert current_season(date(2024, 7, 15)) == "kharif"
        assert current_season(date(2024, 12, 1)) == "rabi"

    def test_override_takes_precedence(self):
        farm = FarmContext(season="rabi")

        assert resolve_season("Zaid", farm, date(2024, 7, 1)) == "zaid"
        assert resolve_season(None, farm, date(2024, 7, 1)) == "rabi"
        assert resolve_season("  ", FarmContext(), date(2024, 7, 1)) == "kharif"


# ============================================================
# Combined Indicator Tests
# ============================================================

class TestAllStressIndicators:
    """Tests for the combined calculation."""

    def test_all_indicators_from_snapshot(self, sample_snapshot, rainfed_farm):
        """Indicators use current conditions and total forecast rainfall."""
        result = calculate_all_stress_indicators(
            sample_snapshot, rainfed_farm, today=date(2024, 7, 1)
        )

        assert result.season == "kharif"
        assert result.heat_stress_index.level == "medium"
        assert result.heat_stress_index.max_temp == 36.0
        assert result.soil_moisture_stress.level == "severe"
        assert result.rainfall_irregularity.total_rainfall == 20.0
        assert result.rainfall_irregularity.expected_rainfall == 200
        assert result.rainfall_irregularity.level == "highly-irregular"

    def test_season_override(self, sample_snapshot, rainfed_farm):
        result = calculate_all_stress_indicators(
            sample_snapshot, rainfed_farm, season="rabi", today=date(2024, 7, 1)
        )

        assert result.season == "rabi"
        assert result.heat_stress_index.level == "high"

    def test_end_to_end_extreme_heat(self, rainfed_farm):
        snapshot = make_snapshot(temp_max=46.0)

        result = calculate_all_stress_indicators(snapshot, rainfed_farm, season="kharif")

        assert result.heat_stress_index.value == 100
        assert result.heat_stress_index.level == "extreme"

    def test_missing_and_negative_rainfall_counts_as_zero(self, rainfed_farm):
        snapshot = make_snapshot(daily_rainfall=[-5.0, 0.0, 10.0])
        snapshot.forecast[1].rainfall = None

        result = calculate_all_stress_indicators(snapshot, rainfed_farm, season="kharif")

        assert result.rainfall_irregularity.total_rainfall == 10.0

    def test_serializes_with_camel_case(self, sample_snapshot, rainfed_farm):
        result = calculate_all_stress_indicators(sample_snapshot, rainfed_farm, season="kharif")
        data = result.model_dump(by_alias=True)

        assert set(data) == {
            "heatStressIndex", "soilMoistureStress", "rainfallIrregularity", "season"
        }
        assert "estimatedMoisture" in data["soilMoistureStress"]
        assert "maxTemp" in data["heatStressIndex"]
