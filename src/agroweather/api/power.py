"""
NASA POWER daily point API.

POWER serves reanalysis-based daily point weather; the agroclimatology
community returns radiation in MJ/m²/day.
"""

from datetime import date
from typing import Any, Dict, Sequence

from .client import APIClient


POWER_PARAMETERS = ("T2M_MAX", "T2M_MIN", "T2M", "PRECTOTCORR", "ALLSKY_SFC_SW_DWN", "RH2M")


class PowerAPI(APIClient):
    """NASA POWER daily point operations."""

    def get_daily_point(
        self,
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date,
        parameters: Sequence[str] = POWER_PARAMETERS,
        community: str = "AG"
    ) -> Dict[str, Any]:
        """
        Get daily values at a point for an inclusive date range.

        Args:
            latitude: Latitude (degrees)
            longitude: Longitude (degrees)
            start_date: First date
            end_date: Last date
            parameters: POWER parameter names
            community: POWER user community (sets the units)

        Returns:
            GeoJSON feature with ``properties.parameter`` mapping each
            parameter to ``{"YYYYMMDD": value}``
        """
        self.logger.debug(
            f"Fetching POWER {start_date}..{end_date} at ({latitude}, {longitude})"
        )
        params = {
            "parameters": ",".join(parameters),
            "community": community,
            "latitude": latitude,
            "longitude": longitude,
            "start": start_date.strftime("%Y%m%d"),
            "end": end_date.strftime("%Y%m%d"),
            "format": "JSON",
        }
        return self.get("/point", params=params)
