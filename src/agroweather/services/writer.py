"""
Data writer module for exporting pipeline results.

Writes summary rows and enriched daily records as delimited tables and
the batch manifest as JSON.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from ..core import DateUtils
from ..models import (
    BatchResult, DailyRecord, SummaryRow, DAILY_COLUMNS, SUMMARY_COLUMNS
)


_INTEGER_SUMMARY_COLUMNS = ("duration", "extreme_precipitation", "extreme_temperature")
_TEXT_SUMMARY_COLUMNS = ("site_id", "label", "name")
_DATE_SUMMARY_COLUMNS = ("start", "end")


def format_cell(value: Any) -> str:
    """Render one cell; absent values become an empty string."""
    if value is None:
        return ""
    if isinstance(value, float):
        return repr(value)
    return str(value)


class DataWriter:
    """Write pipeline results to an output directory."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        delimiter: str = ",",
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize data writer.

        Args:
            output_dir: Directory receiving the output files (created if missing)
            delimiter: Field delimiter for tables
            logger: Logger instance
        """
        self.output_dir = Path(output_dir)
        self.delimiter = delimiter
        self.logger = logger or logging.getLogger(__name__)

    def _write_table(
        self,
        filename: str,
        columns: Sequence[str],
        rows: Iterable[Dict[str, Any]]
    ) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename

        count = 0
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, delimiter=self.delimiter)
            writer.writerow(columns)
            for row in rows:
                writer.writerow([format_cell(row.get(column)) for column in columns])
                count += 1

        self.logger.info(f"Wrote {count} rows to {path}")
        return path

    def write_summaries(self, rows: Sequence[SummaryRow], filename: str = "summary.csv") -> Path:
        """Write summary rows, one per (site, interval)."""
        return self._write_table(filename, SUMMARY_COLUMNS, (row.to_dict() for row in rows))

    def write_daily(self, records: Sequence[DailyRecord], filename: str = "daily.csv") -> Path:
        """Write enriched daily records."""
        return self._write_table(filename, DAILY_COLUMNS, (r.to_dict() for r in records))

    def read_summaries(self, path: Union[str, Path]) -> List[SummaryRow]:
        """
        Read a summary table written by ``write_summaries``.

        Args:
            path: Table path (relative paths resolve against the output directory)

        Returns:
            Summary rows with numeric columns parsed back to numbers
        """
        path = Path(path)
        if not path.is_absolute() and not path.exists():
            path = self.output_dir / path

        rows = []
        with open(path, "r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f, delimiter=self.delimiter)
            for raw in reader:
                rows.append(SummaryRow(**self._parse_summary(raw)))

        self.logger.debug(f"Read {len(rows)} summary rows from {path}")
        return rows

    @staticmethod
    def _parse_summary(raw: Dict[str, str]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for column in SUMMARY_COLUMNS:
            cell = raw.get(column, "")
            if cell == "":
                values[column] = None
            elif column in _TEXT_SUMMARY_COLUMNS:
                values[column] = cell
            elif column in _DATE_SUMMARY_COLUMNS:
                values[column] = DateUtils.parse_date(cell)
            elif column in _INTEGER_SUMMARY_COLUMNS:
                values[column] = int(cell)
            else:
                values[column] = float(cell)
        return values

    def write_manifest(
        self,
        result: BatchResult,
        filename: str = "manifest.json",
        extra: Optional[Dict[str, Any]] = None
    ) -> Path:
        """
        Write the per-site status and failure manifest.

        Args:
            result: Batch result
            filename: Manifest file name
            extra: Additional top-level keys (run settings)
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename

        manifest = {
            "generated_at": DateUtils.to_iso_with_timezone(DateUtils.utc_now()),
            **(extra or {}),
            **result.manifest(),
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=2)

        self.logger.info(
            f"Wrote manifest to {path}: {len(result.succeeded)} succeeded, "
            f"{len(result.failed)} failed, {len(result.failures)} collected failures"
        )
        return path

    def write_batch(self, result: BatchResult, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Path]:
        """Write summaries, daily records and manifest; return their paths."""
        return {
            "summary": self.write_summaries(result.summaries),
            "daily": self.write_daily(result.daily),
            "manifest": self.write_manifest(result, extra=extra),
        }
