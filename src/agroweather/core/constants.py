"""
Application-wide constants for agroclimatic indicator estimation.

This module defines default values and constants used throughout the application.
Thresholds can be overridden from the configuration file; these are the defaults.
"""

# Physical Constants
LATENT_HEAT_VAPORIZATION = 2.45  # MJ/kg
SOLAR_CONSTANT = 0.0820  # MJ m⁻² min⁻¹

# Vapor Pressure Constants (Tetens formula)
TETENS_A = 0.6108  # kPa
TETENS_B = 17.27
TETENS_C = 237.3  # °C

# Solar Geometry Constants
EARTH_ORBIT_ECCENTRICITY = 0.033
SOLAR_DECLINATION_AMPLITUDE = 0.409
SOLAR_DECLINATION_PHASE = 1.39  # radians
DAYS_PER_YEAR = 365

# Hargreaves-Samani
HARGREAVES_COEF = 0.0135
HARGREAVES_KRS = 0.17  # Radiation adjustment coefficient
HARGREAVES_TEMP_OFFSET = 17.8  # °C

# Crop heat units (Ontario maize index)
CHU_TMAX_BASE = 10.0  # °C
CHU_TMAX_LINEAR = 3.33
CHU_TMAX_QUADRATIC = 0.084
CHU_TMIN_BASE = 4.44  # °C
CHU_TMIN_SLOPE = 1.8

# Growing degree units
GDU_BASE = 10.0  # °C
GDU_CEILING = 30.0  # °C

# Extreme-event thresholds
EXTREME_PRECIPITATION_MM = 25.0  # strictly greater than
EXTREME_TEMPERATURE_C = 30.0  # greater than or equal

# Satellite precipitation auxiliary index window
PRECIPITATION_INDEX_WINDOW_DAYS = 30

# Interval generation defaults
DEFAULT_N_INTERVALS = 4
DEFAULT_DAYS_PRIOR_PLANTING = 0

# Batch defaults
DEFAULT_MAX_WORKERS = 4
DEFAULT_FETCH_TIMEOUT = 120  # seconds, counted from the start of each fetch
FETCH_POLL_INTERVAL = 0.1  # seconds between checks while fetches are queued

# Unit conversion
SECONDS_PER_HOUR = 3600.0
JOULES_PER_MEGAJOULE = 1e6
PASCALS_PER_KILOPASCAL = 1000.0
