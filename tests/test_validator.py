"""
Tests for record validation and unit conversion.
"""

from datetime import date, timedelta

import pytest  # type: ignore

from src.agroweather.models import DailyRecord
from src.agroweather.processing import DataValidator, UnitConverter


def record(day=0, **fields):
    return DailyRecord(site_id="S1", date=date(2018, 5, 1) + timedelta(days=day), **fields)


class TestDataValidator:
    """Test cases for DataValidator."""

    @pytest.fixture
    def validator(self):
        return DataValidator()

    def test_valid_record(self, validator):
        ok, errors = validator.validate_record(
            record(t_max=25.0, t_min=10.0, t_mean=17.5, precipitation=0.0, rh=55.0)
        )
        assert ok
        assert errors == []

    def test_temperature_ordering(self, validator):
        ok, errors = validator.validate_record(record(t_max=10.0, t_min=12.0, t_mean=11.0))
        assert not ok
        assert any("t_min" in e for e in errors)

    def test_mean_outside_range(self, validator):
        ok, errors = validator.validate_record(record(t_max=20.0, t_min=10.0, t_mean=21.0))
        assert not ok

    @pytest.mark.parametrize("fields", [
        {"precipitation": -0.1},
        {"rh": 101.0},
        {"radiation": -1.0},
        {"day_length": 25.0},
    ])
    def test_out_of_range(self, validator, fields):
        ok, _ = validator.validate_record(record(**fields))
        assert not ok

    def test_absent_fields_are_not_errors(self, validator):
        ok, _ = validator.validate_record(record())
        assert ok

    def test_validate_records(self, validator):
        failures = validator.validate_records([
            record(0, t_max=20.0, t_min=10.0),
            record(1, t_max=5.0, t_min=10.0),
        ])
        assert len(failures) == 1
        assert failures[0].key == "2018-05-02"
        assert failures[0].stage == "validation"

    def test_completeness_detects_gap(self, validator):
        records = [record(0, precipitation=1.0), record(2, precipitation=1.0)]
        assert not validator.check_data_completeness(records)

    def test_completeness_required_fields(self, validator):
        records = [record(0, precipitation=1.0), record(1)]
        assert validator.check_data_completeness(records)
        assert not validator.check_data_completeness(records, ["precipitation"])

    def test_completeness_empty(self, validator):
        assert not validator.check_data_completeness([])


class TestUnitConverter:
    """Test cases for UnitConverter."""

    def test_pressure(self):
        assert UnitConverter.convert_pressure(1500.0, "Pa") == pytest.approx(1.5)
        assert UnitConverter.convert_pressure(1013.0, "hPa") == pytest.approx(101.3)

    def test_radiation_to_daily_energy(self):
        # 400 W/m² over 12 h
        assert UnitConverter.radiation_to_daily_energy(400.0, 43200.0) == pytest.approx(17.28)

    def test_saturation_vapor_pressure(self):
        assert UnitConverter.saturation_vapor_pressure(20.0) == pytest.approx(2.338, abs=1e-3)

    def test_vpd_clamped(self):
        assert UnitConverter.vpd_from_vapor_pressure(10.0, 2.0) == 0.0
        assert UnitConverter.vpd_from_humidity(20.0, 100.0) == 0.0

    def test_vpd_from_humidity(self):
        es = UnitConverter.saturation_vapor_pressure(25.0)
        assert UnitConverter.vpd_from_humidity(25.0, 40.0) == pytest.approx(es * 0.6)
