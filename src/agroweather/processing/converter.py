"""
Unit conversion module.

Converts provider-native meteorological units to the canonical daily schema
and estimates vapor pressure deficit when a provider does not report it.
"""

import logging
import math
from typing import Optional

from ..core import constants


class UnitConverter:
    """Convert between different meteorological units."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize unit converter.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def convert_pressure(value: float, from_unit: str, to_unit: str = "kPa") -> float:
        """
        Convert pressure between units.

        Args:
            value: Pressure value
            from_unit: Source unit (kPa, hPa, Pa, mbar)
            to_unit: Target unit

        Returns:
            Converted pressure value
        """
        if from_unit == to_unit:
            return value

        from_unit_lower = from_unit.lower()
        if from_unit_lower in ["hpa", "mbar", "millibar"]:
            kpa = value / 10
        elif from_unit_lower in ["pa", "pascal"]:
            kpa = value / constants.PASCALS_PER_KILOPASCAL
        else:
            kpa = value  # Assume kPa

        to_unit_lower = to_unit.lower()
        if to_unit_lower in ["hpa", "mbar", "millibar"]:
            return kpa * 10
        elif to_unit_lower in ["pa", "pascal"]:
            return kpa * constants.PASCALS_PER_KILOPASCAL
        else:
            return kpa

    @staticmethod
    def seconds_to_hours(value: float) -> float:
        """Convert a duration in seconds to hours."""
        return value / constants.SECONDS_PER_HOUR

    @staticmethod
    def radiation_to_daily_energy(flux_wm2: float, day_length_s: float) -> float:
        """
        Convert a daylight-average radiation flux to a daily total.

        Args:
            flux_wm2: Mean shortwave flux over the daylight period (W/m²)
            day_length_s: Daylight duration (s)

        Returns:
            Daily radiation (MJ m⁻² day⁻¹)
        """
        return flux_wm2 * day_length_s / constants.JOULES_PER_MEGAJOULE

    @staticmethod
    def saturation_vapor_pressure(temperature: float) -> float:
        """
        Calculate saturation vapor pressure using the Tetens formula.

        Args:
            temperature: Temperature (°C)

        Returns:
            Saturation vapor pressure (kPa)
        """
        return constants.TETENS_A * math.exp(
            (constants.TETENS_B * temperature) / (temperature + constants.TETENS_C)
        )

    @classmethod
    def vpd_from_vapor_pressure(cls, t_mean: float, actual_vapor_pressure_kpa: float) -> float:
        """
        VPD = es(Tmean) − ea, clamped at zero.

        Args:
            t_mean: Mean air temperature (°C)
            actual_vapor_pressure_kpa: Actual vapor pressure (kPa)
        """
        return max(0.0, cls.saturation_vapor_pressure(t_mean) - actual_vapor_pressure_kpa)

    @classmethod
    def vpd_from_humidity(cls, t_mean: float, relative_humidity: float) -> float:
        """
        VPD = es(Tmean)·(1 − RH/100), clamped at zero.

        Args:
            t_mean: Mean air temperature (°C)
            relative_humidity: Relative humidity (%)
        """
        return max(0.0, cls.saturation_vapor_pressure(t_mean) * (1 - relative_humidity / 100))
