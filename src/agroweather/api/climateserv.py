"""
ClimateSERV API.

ClimateSERV serves area statistics of satellite products such as CHIRPS
daily precipitation. Requests are asynchronous jobs: submit, poll the
progress, then download the result.
"""

import json
import time
from datetime import date
from typing import Any, Dict, List

from .client import APIClient


CHIRPS_DATATYPE = 0
OPERATION_AVERAGE = 5
INTERVAL_DAILY = 0


class ClimateServAPI(APIClient):
    """ClimateSERV job operations."""

    def __init__(self, *args, poll_interval: float = 2.0, max_polls: int = 60, **kwargs):
        """
        Initialize ClimateSERV client.

        Args:
            poll_interval: Seconds between progress checks
            max_polls: Progress checks before giving up on a job
            *args, **kwargs: Passed to APIClient
        """
        super().__init__(*args, **kwargs)
        self.poll_interval = poll_interval
        self.max_polls = max_polls

    @staticmethod
    def point_geometry(latitude: float, longitude: float, half_width: float = 0.01) -> str:
        """Small square polygon around a point, as GeoJSON text."""
        ring: List[List[float]] = [
            [longitude - half_width, latitude - half_width],
            [longitude + half_width, latitude - half_width],
            [longitude + half_width, latitude + half_width],
            [longitude - half_width, latitude + half_width],
            [longitude - half_width, latitude - half_width],
        ]
        return json.dumps({"type": "Polygon", "coordinates": [ring]})

    def submit_request(
        self,
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date,
        datatype: int = CHIRPS_DATATYPE
    ) -> str:
        """
        Submit an area-average job.

        Returns:
            Job identifier
        """
        params = {
            "datatype": datatype,
            "begintime": start_date.strftime("%m/%d/%Y"),
            "endtime": end_date.strftime("%m/%d/%Y"),
            "intervaltype": INTERVAL_DAILY,
            "operationtype": OPERATION_AVERAGE,
            "geometry": self.point_geometry(latitude, longitude),
        }
        result = self.get("/submitDataRequest/", params=params)
        job_id = result[0] if isinstance(result, list) else result
        self.logger.debug(f"Submitted ClimateSERV job {job_id}")
        return str(job_id)

    def get_progress(self, job_id: str) -> float:
        """Job completion percentage (0-100)."""
        result = self.get("/getDataRequestProgress/", params={"id": job_id})
        progress = result[0] if isinstance(result, list) else result
        return float(progress)

    def get_result(self, job_id: str) -> Dict[str, Any]:
        """Download a finished job's result."""
        return self.get("/getDataFromRequest/", params={"id": job_id})

    def get_daily_precipitation(
        self,
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date
    ) -> Dict[str, Any]:
        """
        Run a CHIRPS job to completion and return its rows.

        Returns:
            Payload with ``data`` rows ``{"date": "MM/DD/YYYY", "value": {"avg": mm}}``

        Raises:
            TimeoutError: If the job does not finish within max_polls checks
            RuntimeError: If the job reports failure
        """
        job_id = self.submit_request(latitude, longitude, start_date, end_date)

        for _ in range(self.max_polls):
            progress = self.get_progress(job_id)
            if progress < 0:
                raise RuntimeError(f"ClimateSERV job {job_id} failed")
            if progress >= 100:
                return self.get_result(job_id)
            time.sleep(self.poll_interval)

        raise TimeoutError(
            f"ClimateSERV job {job_id} unfinished after {self.max_polls} checks"
        )
