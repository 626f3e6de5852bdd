"""
Calculation algorithms for agroclimatic indicators.

Provides solar geometry, Hargreaves-Samani evapotranspiration, heat units
and the engine that attaches them to daily records.
"""

from .solar import SolarGeometry, SolarComponents
from .hargreaves import HargreavesCalculator, ReferenceEvapotranspiration
from .heat_units import (
    crop_heat_units,
    growing_degree_units,
    extreme_precipitation,
    extreme_temperature,
)
from .calculator import DerivedVariableEngine

__all__ = [
    "SolarGeometry",
    "SolarComponents",
    "HargreavesCalculator",
    "ReferenceEvapotranspiration",
    "crop_heat_units",
    "growing_degree_units",
    "extreme_precipitation",
    "extreme_temperature",
    "DerivedVariableEngine",
]
