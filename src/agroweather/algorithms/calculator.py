"""
Derived-variable engine.

This module provides a simplified interface to the indicator algorithms,
attaching reference evapotranspiration, heat units and extreme-event flags
to canonical daily records.
"""

import dataclasses
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core import constants
from ..core.exceptions import DataValidityError
from ..models import DailyRecord, Site, FailureRecord
from .hargreaves import HargreavesCalculator
from .heat_units import (
    crop_heat_units,
    growing_degree_units,
    extreme_precipitation,
    extreme_temperature,
)


class DerivedVariableEngine:
    """
    High-level calculator for derived daily indicators.

    Each derived field is computed only when its inputs are present on the
    record; otherwise it stays absent. Records are immutable, so enrichment
    returns a new record.
    """

    def __init__(
        self,
        extreme_precipitation_mm: float = constants.EXTREME_PRECIPITATION_MM,
        extreme_temperature_c: float = constants.EXTREME_TEMPERATURE_C,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize derived-variable engine.

        Args:
            extreme_precipitation_mm: Daily precipitation above which a day is extreme
            extreme_temperature_c: Daily Tmax at or above which a day is extreme
            logger: Logger instance
        """
        self.extreme_precipitation_mm = extreme_precipitation_mm
        self.extreme_temperature_c = extreme_temperature_c
        self.logger = logger or logging.getLogger(__name__)

    def derive(
        self,
        record: DailyRecord,
        latitude: float,
        include_et0: bool = True
    ) -> Dict[str, Any]:
        """
        Compute derived fields for one record.

        Args:
            record: Canonical daily record
            latitude: Owning site latitude (degrees)
            include_et0: Whether to compute reference evapotranspiration

        Returns:
            Mapping of derived field name to value (only computable fields)

        Raises:
            DataValidityError: If the record's temperatures are inconsistent
        """
        derived: Dict[str, Any] = {}

        if record.precipitation is not None:
            derived["extreme_precipitation"] = extreme_precipitation(
                record.precipitation, self.extreme_precipitation_mm
            )

        if record.t_max is not None:
            derived["extreme_temperature"] = extreme_temperature(
                record.t_max, self.extreme_temperature_c
            )

        if record.t_max is not None and record.t_min is not None:
            derived["chu"] = crop_heat_units(record.t_max, record.t_min)
            derived["gdu"] = growing_degree_units(record.t_max, record.t_min)

            if include_et0 and record.t_mean is not None:
                try:
                    derived["et0"] = HargreavesCalculator.calculate_et0(
                        t_max=record.t_max,
                        t_min=record.t_min,
                        t_mean=record.t_mean,
                        latitude=latitude,
                        day_number=record.day_of_year
                    )
                except DataValidityError as e:
                    raise DataValidityError(
                        str(e), site_id=record.site_id, key=record.date.isoformat()
                    ) from e

        return derived

    def enrich(self, record: DailyRecord, latitude: float) -> DailyRecord:
        """
        Return a copy of the record with derived fields attached.

        Raises:
            DataValidityError: If ET0 cannot be computed for the record
        """
        return dataclasses.replace(record, **self.derive(record, latitude))

    def enrich_all(
        self,
        records: Sequence[DailyRecord],
        site: Site,
        strict: bool = False
    ) -> Tuple[List[DailyRecord], List[FailureRecord]]:
        """
        Enrich a site's records, collecting per-day failures.

        A failing record keeps every derived field that could be computed
        and lacks only the failed one.

        Args:
            records: Canonical daily records for the site
            site: Owning site
            strict: Re-raise the first failure instead of collecting it

        Returns:
            Tuple of (enriched_records, failures)
        """
        enriched: List[DailyRecord] = []
        failures: List[FailureRecord] = []

        for record in records:
            try:
                enriched.append(self.enrich(record, site.latitude))
            except DataValidityError as e:
                if strict:
                    raise
                self.logger.warning(f"Derivation failed for {site.id} on {record.date}: {e}")
                failures.append(FailureRecord(
                    site_id=site.id,
                    stage="derivation",
                    key=record.date.isoformat(),
                    reason=str(e)
                ))
                partial = self.derive(record, site.latitude, include_et0=False)
                enriched.append(dataclasses.replace(record, **partial))

        self.logger.debug(
            f"Enriched {len(enriched)} records for {site.id} ({len(failures)} failures)"
        )
        return enriched, failures
