"""
Hargreaves-Samani reference evapotranspiration module.

ET0 = 0.0135 · kRs · (Ra / λ) · sqrt(Tmax − Tmin) · (Tmean + 17.8)

where Ra/λ converts extraterrestrial radiation to its evaporation
equivalent (mm/day) and kRs is the radiation adjustment coefficient.

Reference:
    Hargreaves, G.H., Samani, Z.A. (1985). Reference crop evapotranspiration
    from temperature. Applied Engineering in Agriculture 1(2), 96-99.
"""

import math
from dataclasses import dataclass

from ..core import constants
from ..core.exceptions import DataValidityError
from .solar import SolarGeometry, SolarComponents


@dataclass
class ReferenceEvapotranspiration:
    """ET0 together with the solar geometry it was derived from."""

    et0: float  # mm/day
    solar: SolarComponents


class HargreavesCalculator:
    """Calculator for reference evapotranspiration from temperature only."""

    @staticmethod
    def calculate_et0(
        t_max: float,
        t_min: float,
        t_mean: float,
        latitude: float,
        day_number: int,
        krs: float = constants.HARGREAVES_KRS
    ) -> float:
        """
        Calculate daily reference evapotranspiration.

        Args:
            t_max: Daily maximum temperature (°C)
            t_min: Daily minimum temperature (°C)
            t_mean: Daily mean temperature (°C)
            latitude: Site latitude (degrees)
            day_number: Day of year (1-366)
            krs: Radiation adjustment coefficient

        Returns:
            Reference evapotranspiration (mm/day)

        Raises:
            DataValidityError: If t_max < t_min (square root undefined)
        """
        return HargreavesCalculator.calculate_with_components(
            t_max=t_max,
            t_min=t_min,
            t_mean=t_mean,
            latitude=latitude,
            day_number=day_number,
            krs=krs
        ).et0

    @staticmethod
    def calculate_with_components(
        t_max: float,
        t_min: float,
        t_mean: float,
        latitude: float,
        day_number: int,
        krs: float = constants.HARGREAVES_KRS
    ) -> ReferenceEvapotranspiration:
        """
        Calculate ET0 and return the intermediate solar geometry.

        Args:
            Same as calculate_et0()
        """
        if t_max < t_min:
            raise DataValidityError(
                f"Tmax ({t_max}) < Tmin ({t_min}); temperature range is undefined"
            )

        solar = SolarGeometry.compute(latitude, day_number)
        ra_mm = solar.ra / constants.LATENT_HEAT_VAPORIZATION

        et0 = (
            constants.HARGREAVES_COEF * krs * ra_mm
            * math.sqrt(t_max - t_min)
            * (t_mean + constants.HARGREAVES_TEMP_OFFSET)
        )

        return ReferenceEvapotranspiration(et0=et0, solar=solar)
