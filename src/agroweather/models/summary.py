"""
Summary data models.

Contains the per-interval summary row and the batch result containers.
"""

import datetime
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class SummaryRow:
    """Per-interval reduction of a site's enriched daily records."""

    site_id: str
    label: str
    start: datetime.date
    end: datetime.date  # exclusive
    duration: int
    precipitation: Optional[float]
    extreme_precipitation: Optional[int]
    sdi: Optional[float]  # Shannon evenness of daily precipitation
    awdr: Optional[float]  # precipitation weighted by evenness
    name: Optional[str] = None
    t_mean: Optional[float] = None
    radiation: Optional[float] = None
    vpd: Optional[float] = None
    et0: Optional[float] = None
    extreme_temperature: Optional[int] = None
    chu: Optional[float] = None
    gdd: Optional[float] = None
    q_chu: Optional[float] = None  # radiation per crop heat unit
    q_gdd: Optional[float] = None  # radiation per growing degree day

    def to_dict(self) -> Dict[str, Any]:
        row = asdict(self)
        row["start"] = self.start.isoformat()
        row["end"] = self.end.isoformat()
        return {column: row[column] for column in SUMMARY_COLUMNS}


SUMMARY_COLUMNS: Tuple[str, ...] = (
    "site_id", "label", "name", "start", "end", "duration",
    "precipitation", "t_mean", "radiation", "vpd", "et0",
    "extreme_precipitation", "extreme_temperature", "chu", "gdd",
    "sdi", "q_chu", "q_gdd", "awdr",
)


@dataclass(frozen=True)
class FailureRecord:
    """One collected failure: which site, which stage, which day or interval."""

    site_id: str
    stage: str  # fetch | validation | derivation | aggregation
    reason: str
    key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SiteStatus:
    """Outcome of one site in a batch run."""

    site_id: str
    success: bool
    reason: Optional[str] = None
    n_records: int = 0
    n_summaries: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BatchResult:
    """Partial result set plus a manifest of failures."""

    summaries: List[SummaryRow] = field(default_factory=list)
    daily: List[Any] = field(default_factory=list)
    statuses: Dict[str, SiteStatus] = field(default_factory=dict)
    failures: List[FailureRecord] = field(default_factory=list)

    @property
    def succeeded(self) -> List[str]:
        return [s.site_id for s in self.statuses.values() if s.success]

    @property
    def failed(self) -> List[str]:
        return [s.site_id for s in self.statuses.values() if not s.success]

    @property
    def is_complete(self) -> bool:
        """True when every site succeeded and nothing was collected as a failure."""
        return not self.failed and not self.failures

    def manifest(self) -> Dict[str, Any]:
        return {
            "sites": [status.to_dict() for status in self.statuses.values()],
            "failures": [failure.to_dict() for failure in self.failures],
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
        }
