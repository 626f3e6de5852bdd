"""
Solar geometry module.

Implements the FAO-56 astronomical relationships used by the reference
evapotranspiration estimate and by adapters that need day length:
inverse relative Earth-Sun distance, solar declination, sunset hour angle,
extraterrestrial radiation and maximum daylight hours.

Reference:
    Allen, R.G., Pereira, L.S., Raes, D., Smith, M. (1998). Crop
    evapotranspiration. FAO Irrigation and Drainage Paper 56, eqs. 21-25, 34.
"""

import math
from dataclasses import dataclass

from ..core import constants


@dataclass
class SolarComponents:
    """Container for the solar geometry of one site-day."""

    latitude_rad: float
    dr: float  # Inverse relative distance Earth-Sun
    declination: float  # radians
    sunset_hour_angle: float  # radians
    ra: float  # Extraterrestrial radiation (MJ m⁻² day⁻¹)
    daylight_hours: float  # hours


class SolarGeometry:
    """Astronomical quantities as a function of latitude and day of year."""

    @staticmethod
    def inverse_relative_distance(day_number: int) -> float:
        """
        dr = 1 + 0.033·cos(2π·J/365)

        Args:
            day_number: Day of year (1-366)
        """
        return 1 + constants.EARTH_ORBIT_ECCENTRICITY * math.cos(
            2 * math.pi * day_number / constants.DAYS_PER_YEAR
        )

    @staticmethod
    def solar_declination(day_number: int) -> float:
        """
        δ = 0.409·sin(2π·J/365 − 1.39)

        Returns:
            Solar declination (radians)
        """
        return constants.SOLAR_DECLINATION_AMPLITUDE * math.sin(
            (2 * math.pi / constants.DAYS_PER_YEAR) * day_number
            - constants.SOLAR_DECLINATION_PHASE
        )

    @staticmethod
    def sunset_hour_angle(latitude_rad: float, declination: float) -> float:
        """
        ωs = acos(−tan(φ)·tan(δ))

        The acos argument is clamped to [-1, 1] so that polar day (ωs = π)
        and polar night (ωs = 0) are returned instead of a domain error.
        """
        x = -math.tan(latitude_rad) * math.tan(declination)
        return math.acos(max(-1.0, min(1.0, x)))

    @staticmethod
    def extraterrestrial_radiation(
        latitude_rad: float,
        dr: float,
        declination: float,
        omega_s: float
    ) -> float:
        """
        Ra = (24·60/π)·Gsc·dr·[ωs·sin(φ)·sin(δ) + cos(φ)·sin(ωs)]

        This is the form used by the legacy agronomic workflow: the second
        term carries no cos(δ) factor, unlike FAO-56 eq. 21. Kept as is so
        ET0 series stay comparable with historical outputs.

        Returns:
            Extraterrestrial radiation (MJ m⁻² day⁻¹)
        """
        return (24 * 60 / math.pi) * constants.SOLAR_CONSTANT * dr * (
            omega_s * math.sin(latitude_rad) * math.sin(declination) +
            math.cos(latitude_rad) * math.sin(omega_s)
        )

    @staticmethod
    def daylight_hours(omega_s: float) -> float:
        """N = 24·ωs/π"""
        return 24 / math.pi * omega_s

    @classmethod
    def compute(cls, latitude: float, day_number: int) -> SolarComponents:
        """
        Compute all solar geometry components for a site-day.

        Args:
            latitude: Latitude (degrees)
            day_number: Day of year (1-366)
        """
        phi = math.radians(latitude)
        dr = cls.inverse_relative_distance(day_number)
        declination = cls.solar_declination(day_number)
        omega_s = cls.sunset_hour_angle(phi, declination)
        ra = cls.extraterrestrial_radiation(phi, dr, declination, omega_s)

        return SolarComponents(
            latitude_rad=phi,
            dr=dr,
            declination=declination,
            sunset_hour_angle=omega_s,
            ra=ra,
            daylight_hours=cls.daylight_hours(omega_s),
        )
