"""
Tests for the indicator algorithms.

Covers solar geometry, Hargreaves-Samani ET0, heat units, extreme-event
flags and the derived-variable engine.
"""

import math
from datetime import date

import pytest  # type: ignore

from src.agroweather.algorithms import (
    SolarGeometry,
    HargreavesCalculator,
    DerivedVariableEngine,
    crop_heat_units,
    growing_degree_units,
    extreme_precipitation,
    extreme_temperature,
)
from src.agroweather.core.exceptions import DataValidityError
from src.agroweather.models import DailyRecord


ARLINGTON_LAT = 43.3091


class TestSolarGeometry:
    """Test cases for solar geometry."""

    def test_inverse_relative_distance_extremes(self):
        """dr peaks near perihelion and dips near aphelion."""
        assert SolarGeometry.inverse_relative_distance(1) == pytest.approx(1.033, abs=1e-3)
        assert SolarGeometry.inverse_relative_distance(182) < 0.968

    def test_declination_at_solstice(self):
        """Declination is close to +23.4° around June 21."""
        declination = SolarGeometry.solar_declination(172)
        assert math.degrees(declination) == pytest.approx(23.4, abs=0.1)

    def test_equator_has_twelve_hour_days(self):
        """At the equator the sunset hour angle is π/2 on every day."""
        for day in (1, 80, 172, 355):
            solar = SolarGeometry.compute(0.0, day)
            assert solar.sunset_hour_angle == pytest.approx(math.pi / 2)
            assert solar.daylight_hours == pytest.approx(12.0)

    def test_summer_days_are_longer_in_north(self):
        """Daylight at 43°N is longer in June than in December."""
        june = SolarGeometry.compute(ARLINGTON_LAT, 172)
        december = SolarGeometry.compute(ARLINGTON_LAT, 355)
        assert june.daylight_hours > 15
        assert december.daylight_hours < 9.5

    def test_polar_day_and_night(self):
        """Beyond the polar circles the hour angle clamps instead of failing."""
        midnight_sun = SolarGeometry.compute(80.0, 172)
        polar_night = SolarGeometry.compute(80.0, 355)
        assert midnight_sun.daylight_hours == pytest.approx(24.0)
        assert polar_night.daylight_hours == pytest.approx(0.0)

    def test_extraterrestrial_radiation_formula(self):
        """Ra follows (1440/π)·Gsc·dr·(ωs·sinφ·sinδ + cosφ·sinωs)."""
        solar = SolarGeometry.compute(ARLINGTON_LAT, 172)
        phi = math.radians(ARLINGTON_LAT)
        expected = (1440 / math.pi) * 0.0820 * solar.dr * (
            solar.sunset_hour_angle * math.sin(phi) * math.sin(solar.declination)
            + math.cos(phi) * math.sin(solar.sunset_hour_angle)
        )
        assert solar.ra == pytest.approx(expected)
        assert solar.ra == pytest.approx(43.9, abs=0.2)


class TestHargreavesCalculator:
    """Test cases for Hargreaves-Samani ET0."""

    def test_mid_summer_scenario(self):
        """Arlington, DOY 172, Tmax 28 / Tmin 16 gives a positive mid-summer ET0."""
        et0 = HargreavesCalculator.calculate_et0(
            t_max=28.0, t_min=16.0, t_mean=22.0, latitude=ARLINGTON_LAT, day_number=172
        )
        assert et0 > 0
        assert 5.0 < et0 < 8.0

    def test_with_components(self):
        """Components expose the solar geometry used for ET0."""
        result = HargreavesCalculator.calculate_with_components(
            t_max=28.0, t_min=16.0, t_mean=22.0, latitude=ARLINGTON_LAT, day_number=172
        )
        expected = (
            0.0135 * 0.17 * (result.solar.ra / 2.45)
            * math.sqrt(12.0) * (22.0 + 17.8)
        )
        assert result.et0 == pytest.approx(expected)

    def test_equal_temperatures_give_zero(self):
        """No diurnal range means no ET0."""
        et0 = HargreavesCalculator.calculate_et0(
            t_max=20.0, t_min=20.0, t_mean=20.0, latitude=ARLINGTON_LAT, day_number=172
        )
        assert et0 == 0.0

    def test_inverted_temperatures_raise(self):
        """Tmax < Tmin is a data error, not a NaN."""
        with pytest.raises(DataValidityError):
            HargreavesCalculator.calculate_et0(
                t_max=10.0, t_min=15.0, t_mean=12.0, latitude=ARLINGTON_LAT, day_number=172
            )


class TestHeatUnits:
    """Test cases for heat units and extreme-event flags."""

    def test_gdu_scenario(self):
        """GDU = (16 + 28)/2 − 10 = 12."""
        assert growing_degree_units(28.0, 16.0) == pytest.approx(12.0)

    def test_gdu_clamps(self):
        """Tmin is floored at 10 and Tmax capped at 30."""
        assert growing_degree_units(35.0, 5.0) == pytest.approx(10.0)

    def test_gdu_cold_day_is_negative(self):
        """Tmax has no floor."""
        assert growing_degree_units(6.0, 2.0) == pytest.approx(-2.0)

    def test_chu_literal_formula(self):
        """Ymax keeps its linear second term."""
        y_max = 3.33 * 18.0 - 0.084 * 18.0
        y_min = 1.8 * (16.0 - 4.44)
        assert crop_heat_units(28.0, 16.0) == pytest.approx((y_max + y_min) / 2)

    def test_chu_below_bases(self):
        """Both terms are zero below their base temperatures."""
        assert crop_heat_units(8.0, 3.0) == 0.0

    def test_extreme_precipitation_is_strict(self):
        assert extreme_precipitation(25.0) == 0
        assert extreme_precipitation(25.1) == 1

    def test_extreme_temperature_is_inclusive(self):
        assert extreme_temperature(29.9) == 0
        assert extreme_temperature(30.0) == 1

    def test_custom_thresholds(self):
        assert extreme_precipitation(12.0, threshold=10.0) == 1
        assert extreme_temperature(28.0, threshold=28.0) == 1


class TestDerivedVariableEngine:
    """Test cases for the derived-variable engine."""

    @pytest.fixture
    def engine(self):
        return DerivedVariableEngine()

    @pytest.fixture
    def record(self):
        return DailyRecord(
            site_id="ARL",
            date=date(2018, 6, 21),
            precipitation=3.0,
            t_max=28.0,
            t_min=16.0,
            t_mean=22.0,
        )

    def test_scenario_record(self, engine, record):
        """Mid-summer record gets ET0, GDU 12 and no extreme flags."""
        enriched = engine.enrich(record, ARLINGTON_LAT)
        assert enriched.day_of_year == 172
        assert 5.0 < enriched.et0 < 8.0
        assert enriched.gdu == pytest.approx(12.0)
        assert enriched.extreme_temperature == 0
        assert enriched.extreme_precipitation == 0

    def test_enrich_returns_new_record(self, engine, record):
        """Records are immutable; enrichment copies."""
        enriched = engine.enrich(record, ARLINGTON_LAT)
        assert record.et0 is None
        assert enriched is not record
        assert enriched.t_max == record.t_max

    def test_precipitation_only_record(self, engine):
        """Temperature-derived fields stay absent without temperatures."""
        record = DailyRecord(site_id="X", date=date(2018, 5, 2), precipitation=30.0)
        enriched = engine.enrich(record, 10.0)
        assert enriched.extreme_precipitation == 1
        assert enriched.et0 is None
        assert enriched.chu is None
        assert enriched.gdu is None
        assert enriched.extreme_temperature is None

    def test_configured_thresholds(self):
        engine = DerivedVariableEngine(extreme_precipitation_mm=5.0, extreme_temperature_c=25.0)
        record = DailyRecord(
            site_id="X", date=date(2018, 5, 2), precipitation=6.0, t_max=26.0, t_min=12.0
        )
        enriched = engine.enrich(record, 40.0)
        assert enriched.extreme_precipitation == 1
        assert enriched.extreme_temperature == 1

    def test_invalid_record_names_site_and_date(self, engine):
        bad = DailyRecord(
            site_id="ARL", date=date(2018, 6, 1), t_max=10.0, t_min=15.0, t_mean=12.0
        )
        with pytest.raises(DataValidityError) as excinfo:
            engine.enrich(bad, ARLINGTON_LAT)
        assert excinfo.value.site_id == "ARL"
        assert excinfo.value.key == "2018-06-01"

    def test_enrich_all_collects_failures(self, engine, arlington, record):
        """A bad day is collected and keeps its other derived fields."""
        bad = DailyRecord(
            site_id="ARL", date=date(2018, 6, 22), precipitation=1.0,
            t_max=10.0, t_min=15.0, t_mean=12.0
        )
        enriched, failures = engine.enrich_all([record, bad], arlington)

        assert len(enriched) == 2
        assert len(failures) == 1
        assert failures[0].stage == "derivation"
        assert failures[0].key == "2018-06-22"
        assert enriched[1].et0 is None
        assert enriched[1].gdu is not None
        assert enriched[1].extreme_precipitation == 0

    def test_enrich_all_strict_raises(self, engine, arlington):
        bad = DailyRecord(
            site_id="ARL", date=date(2018, 6, 22), t_max=10.0, t_min=15.0, t_mean=12.0
        )
        with pytest.raises(DataValidityError):
            engine.enrich_all([bad], arlington, strict=True)
