"""
Data validation module.

Validates canonical daily records for physical consistency and completeness.
"""

import logging
from datetime import timedelta
from typing import List, Optional, Sequence, Tuple

from ..models import DailyRecord, FailureRecord


class DataValidator:
    """Validate canonical daily records."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize data validator.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_record(self, record: DailyRecord) -> Tuple[bool, List[str]]:
        """
        Check a record for physically impossible values.

        Violations are reported, not corrected.

        Args:
            record: Daily record

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        if record.t_min is not None and record.t_max is not None:
            if record.t_min > record.t_max:
                errors.append(f"t_min ({record.t_min}) > t_max ({record.t_max})")

        if record.t_mean is not None:
            if record.t_min is not None and record.t_mean < record.t_min:
                errors.append(f"t_mean ({record.t_mean}) < t_min ({record.t_min})")
            if record.t_max is not None and record.t_mean > record.t_max:
                errors.append(f"t_mean ({record.t_mean}) > t_max ({record.t_max})")

        if record.precipitation is not None and record.precipitation < 0:
            errors.append(f"Negative precipitation: {record.precipitation}")

        if record.rh is not None and not (0 <= record.rh <= 100):
            errors.append(f"Invalid rh: {record.rh} (must be 0-100)")

        if record.radiation is not None and record.radiation < 0:
            errors.append(f"Negative radiation: {record.radiation}")

        if record.day_length is not None and not (0 <= record.day_length <= 24):
            errors.append(f"Invalid day_length: {record.day_length} (must be 0-24 h)")

        is_valid = len(errors) == 0
        return is_valid, errors

    def validate_records(self, records: Sequence[DailyRecord]) -> List[FailureRecord]:
        """
        Validate a site's records and collect violations.

        Args:
            records: Daily records for one site

        Returns:
            One FailureRecord per offending record
        """
        violations = []
        for record in records:
            is_valid, errors = self.validate_record(record)
            if not is_valid:
                reason = "; ".join(errors)
                self.logger.warning(f"Invalid record {record.site_id} {record.date}: {reason}")
                violations.append(FailureRecord(
                    site_id=record.site_id,
                    stage="validation",
                    key=record.date.isoformat(),
                    reason=reason
                ))
        return violations

    def check_data_completeness(
        self,
        records: Sequence[DailyRecord],
        required_fields: Optional[Sequence[str]] = None
    ) -> bool:
        """
        Check that the series is gap-free and carries the required fields.

        Args:
            records: Date-sorted daily records for one site
            required_fields: Field names that must be present on every record

        Returns:
            True if complete, False otherwise
        """
        if not records:
            self.logger.error("No daily records")
            return False

        complete = True
        for previous, current in zip(records, records[1:]):
            if current.date - previous.date != timedelta(days=1):
                self.logger.warning(
                    f"Gap in daily series for {current.site_id}: "
                    f"{previous.date} -> {current.date}"
                )
                complete = False

        for field_name in required_fields or ():
            missing = sum(1 for record in records if not record.has(field_name))
            if missing:
                self.logger.warning(f"{missing} records missing {field_name}")
                complete = False

        return complete
