"""
Service layer for site loading and result export.
"""

from .registry import SiteRegistry, SITE_COLUMNS
from .writer import DataWriter

__all__ = [
    "SiteRegistry",
    "SITE_COLUMNS",
    "DataWriter",
]
