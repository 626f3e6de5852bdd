"""
Site registry.

Loads monitored sites from an in-memory mapping or a delimited file and
keeps them in insertion order.
"""

import csv
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from ..core import DateUtils
from ..core.exceptions import DataValidityError
from ..models import Site


# Fixed leading columns of a site file; any later column is a milestone date
SITE_COLUMNS = ("site_id", "crop", "name", "latitude", "longitude", "start", "end")


class SiteRegistry:
    """Ordered collection of sites keyed by id."""

    def __init__(self, sites: Optional[List[Site]] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._sites: Dict[str, Site] = {}
        for site in sites or []:
            self.add(site)

    def add(self, site: Site) -> None:
        """
        Register a site.

        Raises:
            DataValidityError: If the id is already registered
        """
        if site.id in self._sites:
            raise DataValidityError("Duplicate site id", site_id=site.id)
        self._sites[site.id] = site

    def get(self, site_id: str) -> Site:
        """
        Look up a site.

        Raises:
            KeyError: If the site is unknown
        """
        try:
            return self._sites[site_id]
        except KeyError:
            raise KeyError(f"Unknown site: {site_id}")

    @property
    def ids(self) -> List[str]:
        return list(self._sites)

    def __iter__(self) -> Iterator[Site]:
        return iter(list(self._sites.values()))

    def __len__(self) -> int:
        return len(self._sites)

    def __contains__(self, site_id: object) -> bool:
        return site_id in self._sites

    @staticmethod
    def build_site(site_id: str, entry: Mapping[str, Any]) -> Site:
        """
        Build a site from its registry entry.

        Raises:
            DataValidityError: On missing keys or unparseable values
        """
        try:
            return Site(
                id=str(site_id),
                crop=str(entry.get("crop", "")),
                name=str(entry.get("name") or site_id),
                latitude=float(entry["latitude"]),
                longitude=float(entry["longitude"]),
                start=DateUtils.parse_date(entry["start"]),
                end=DateUtils.parse_date(entry["end"]),
                milestones=tuple(
                    DateUtils.parse_date(m) for m in entry.get("milestones") or ()
                ),
            )
        except KeyError as e:
            raise DataValidityError(f"Missing site field {e}", site_id=str(site_id)) from e
        except DataValidityError:
            raise
        except (TypeError, ValueError) as e:
            raise DataValidityError(f"Invalid site entry: {e}", site_id=str(site_id)) from e

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Mapping[str, Any]],
        logger: Optional[logging.Logger] = None
    ) -> "SiteRegistry":
        """
        Build a registry from ``{site_id: {crop, name, latitude, longitude,
        start, end, milestones?}}``.
        """
        registry = cls(logger=logger)
        for site_id, entry in mapping.items():
            registry.add(cls.build_site(site_id, entry))
        registry.logger.info(f"Loaded {len(registry)} sites")
        return registry

    @classmethod
    def from_csv(
        cls,
        path: Union[str, Path],
        delimiter: str = ",",
        logger: Optional[logging.Logger] = None
    ) -> "SiteRegistry":
        """
        Build a registry from a delimited file with one header row.

        The first columns are ``site_id, crop, name, latitude, longitude,
        start, end`` in that order; every further column is positionally an
        ordered milestone date. Blank milestone cells are skipped.
        """
        registry = cls(logger=logger)
        path = Path(path)

        with open(path, "r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f, delimiter=delimiter)
            header = next(reader, None)
            if header is None:
                raise DataValidityError(f"Site file {path} is empty")
            if len(header) < len(SITE_COLUMNS):
                raise DataValidityError(
                    f"Site file {path} needs columns {', '.join(SITE_COLUMNS)}"
                )

            for line_number, cells in enumerate(reader, start=2):
                if not any(cell.strip() for cell in cells):
                    continue
                if len(cells) < len(SITE_COLUMNS):
                    raise DataValidityError(
                        f"Line {line_number} of {path} has {len(cells)} columns"
                    )
                prefix = [cell.strip() for cell in cells[:len(SITE_COLUMNS)]]
                entry: Dict[str, Any] = dict(zip(SITE_COLUMNS, prefix))
                entry["milestones"] = [
                    cell.strip() for cell in cells[len(SITE_COLUMNS):] if cell.strip()
                ]
                registry.add(cls.build_site(entry.pop("site_id"), entry))

        registry.logger.info(f"Loaded {len(registry)} sites from {path}")
        return registry
