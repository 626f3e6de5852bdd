"""
Provider adapters.

One adapter per data source, all behind the ProviderAdapter interface.
"""

import logging
from typing import Optional, TYPE_CHECKING

from .base import FieldMapping, ProviderAdapter
from .daymet import DaymetAdapter
from .power import PowerAdapter
from .chirps import ChirpsAdapter
from ..api import create_client

if TYPE_CHECKING:
    from ..core.config import Config


ADAPTERS = {
    DaymetAdapter.name: DaymetAdapter,
    PowerAdapter.name: PowerAdapter,
    ChirpsAdapter.name: ChirpsAdapter,
}


def get_adapter(
    name: str,
    config: "Config",
    logger: Optional[logging.Logger] = None
) -> ProviderAdapter:
    """
    Build an adapter and its HTTP client from configuration.

    Raises:
        ValueError: If the provider is unknown
    """
    name = name.lower()
    if name not in ADAPTERS:
        raise ValueError(f"Unknown provider: {name} (expected one of: {', '.join(ADAPTERS)})")

    client = create_client(name, config, logger)
    return ADAPTERS[name](client, logger)


__all__ = [
    "FieldMapping",
    "ProviderAdapter",
    "DaymetAdapter",
    "PowerAdapter",
    "ChirpsAdapter",
    "ADAPTERS",
    "get_adapter",
]
