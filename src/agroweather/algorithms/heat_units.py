"""
Heat accumulation indices and extreme-event indicators.

Crop heat units (CHU) follow the Ontario maize index as written in the
legacy agronomic workflow. Its Ymax term is linear in (Tmax - 10); the
published index squares that term in the second coefficient. The literal
form is kept until the intended formula is confirmed.
"""

from ..core import constants


def crop_heat_units(t_max: float, t_min: float) -> float:
    """
    Daily crop heat unit contribution.

    Ymax = 0 if Tmax < 10 else 3.33·(Tmax−10) − 0.084·(Tmax−10)
    Ymin = 0 if Tmin < 4.44 else 1.8·(Tmin − 4.44)
    CHU = (Ymax + Ymin) / 2
    """
    if t_max < constants.CHU_TMAX_BASE:
        y_max = 0.0
    else:
        excess = t_max - constants.CHU_TMAX_BASE
        y_max = constants.CHU_TMAX_LINEAR * excess - constants.CHU_TMAX_QUADRATIC * excess

    if t_min < constants.CHU_TMIN_BASE:
        y_min = 0.0
    else:
        y_min = constants.CHU_TMIN_SLOPE * (t_min - constants.CHU_TMIN_BASE)

    return (y_max + y_min) / 2


def growing_degree_units(t_max: float, t_min: float) -> float:
    """
    Daily growing degree units with the 10/30 °C clamps.

    Tmin is raised to at least 10 °C and Tmax capped at 30 °C before
    averaging. Tmax has no floor, so days colder than 10 °C contribute
    a negative value.
    """
    clamped_min = max(t_min, constants.GDU_BASE)
    clamped_max = min(t_max, constants.GDU_CEILING)
    return (clamped_min + clamped_max) / 2 - constants.GDU_BASE


def extreme_precipitation(
    precipitation: float,
    threshold: float = constants.EXTREME_PRECIPITATION_MM
) -> int:
    """1 when daily precipitation exceeds the threshold."""
    return 1 if precipitation > threshold else 0


def extreme_temperature(
    t_max: float,
    threshold: float = constants.EXTREME_TEMPERATURE_C
) -> int:
    """1 when daily maximum temperature reaches the threshold."""
    return 1 if t_max >= threshold else 0
