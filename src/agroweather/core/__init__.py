"""
Core utilities for the agroweather pipeline.

Provides configuration management, logging, errors and date helpers.
"""

from .config import Config
from .logger import setup_logger, setup_logger_from_config, get_site_logger, LoggerContext
from .exceptions import (
    AgroWeatherError,
    ProviderFetchError,
    DataValidityError,
    SchemaMismatchError,
)
from . import constants
from .date_utils import DateUtils

__all__ = [
    "Config",
    "setup_logger",
    "setup_logger_from_config",
    "get_site_logger",
    "LoggerContext",
    "AgroWeatherError",
    "ProviderFetchError",
    "DataValidityError",
    "SchemaMismatchError",
    "constants",
    "DateUtils",
]
