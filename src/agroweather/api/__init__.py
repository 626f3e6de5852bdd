"""
HTTP layer for the climate-data providers.

Provides low-level clients for Daymet, NASA POWER and ClimateSERV.
"""

import logging
from typing import Optional, TYPE_CHECKING

from .client import APIClient
from .daymet import DaymetAPI
from .power import PowerAPI
from .climateserv import ClimateServAPI

if TYPE_CHECKING:
    from ..core.config import Config


_CLIENTS = {
    "daymet": DaymetAPI,
    "power": PowerAPI,
    "chirps": ClimateServAPI,
}


def create_client(
    provider: str,
    config: "Config",
    logger: Optional[logging.Logger] = None
) -> APIClient:
    """
    Build the HTTP client for a provider from configuration.

    Raises:
        ValueError: If the provider is unknown
    """
    try:
        client_class = _CLIENTS[provider]
    except KeyError:
        raise ValueError(f"Unknown provider: {provider}")

    return client_class(
        base_url=config.provider_base_url(provider),
        timeout=config.provider_timeout,
        max_retries=config.provider_max_retries,
        verify_ssl=config.provider_verify_ssl,
        logger=logger
    )


__all__ = [
    "APIClient",
    "DaymetAPI",
    "PowerAPI",
    "ClimateServAPI",
    "create_client",
]
