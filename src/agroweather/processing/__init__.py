"""
Data processing module for the agroweather pipeline.

Provides unit conversion, record validation, interval generation and
interval aggregation.
"""

from .converter import UnitConverter
from .validator import DataValidator
from .intervals import (
    IntervalGenerator, IntervalStrategy, StrategyKind, ordinal_label, LOOKBACK_NAME
)
from .aggregator import IntervalAggregator, AggregationResult

__all__ = [
    "UnitConverter",
    "DataValidator",
    "IntervalGenerator",
    "IntervalStrategy",
    "StrategyKind",
    "ordinal_label",
    "LOOKBACK_NAME",
    "IntervalAggregator",
    "AggregationResult",
]
