"""
Data models for the agroweather pipeline.

Contains DTOs for sites, daily records, intervals and summaries.
"""

from .site import Site
from .daily import DailyRecord, CANONICAL_FIELDS, DERIVED_FIELDS, DAILY_COLUMNS
from .interval import Interval
from .summary import SummaryRow, SUMMARY_COLUMNS, FailureRecord, SiteStatus, BatchResult

__all__ = [
    "Site",
    "DailyRecord",
    "CANONICAL_FIELDS",
    "DERIVED_FIELDS",
    "DAILY_COLUMNS",
    "Interval",
    "SummaryRow",
    "SUMMARY_COLUMNS",
    "FailureRecord",
    "SiteStatus",
    "BatchResult",
]
