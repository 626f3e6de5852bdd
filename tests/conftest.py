"""
Pytest configuration and shared fixtures for all tests.
"""

import sys
from datetime import date
from pathlib import Path
from unittest.mock import Mock

import pytest
import json

# Add the project root to sys.path so we can import from src
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.agroweather.models import Site  # noqa: E402


@pytest.fixture(scope="session")
def fixtures_dir():
    """Get the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


def _load(fixtures_dir, name):
    with open(fixtures_dir / name) as f:
        return json.load(f)


@pytest.fixture(scope="session")
def daymet_payload(fixtures_dir):
    """Daymet single-pixel response for 2018 days 110-160."""
    return _load(fixtures_dir, "daymet_sample.json")


@pytest.fixture(scope="session")
def power_payload(fixtures_dir):
    """NASA POWER daily point response for 2018-04-28..2018-05-05."""
    return _load(fixtures_dir, "power_sample.json")


@pytest.fixture(scope="session")
def chirps_payload(fixtures_dir):
    """ClimateSERV CHIRPS result for 2018-03-15..2018-05-10."""
    return _load(fixtures_dir, "chirps_sample.json")


@pytest.fixture(scope="session")
def sites_csv(fixtures_dir):
    """Site registry file with positional milestone columns."""
    return fixtures_dir / "sites.csv"


@pytest.fixture
def arlington():
    """Maize site with two milestones."""
    return Site(
        id="ARL",
        crop="maize",
        name="Arlington",
        latitude=43.3091,
        longitude=-89.3473,
        start=date(2018, 5, 1),
        end=date(2018, 5, 31),
        milestones=(date(2018, 5, 8), date(2018, 5, 20)),
    )


@pytest.fixture
def daymet_client(daymet_payload):
    """Mock Daymet HTTP client returning the fixture payload."""
    client = Mock()
    client.get_daily.return_value = daymet_payload
    return client


@pytest.fixture
def power_client(power_payload):
    """Mock POWER HTTP client returning the fixture payload."""
    client = Mock()
    client.get_daily_point.return_value = power_payload
    return client


@pytest.fixture
def chirps_client(chirps_payload):
    """Mock ClimateSERV HTTP client returning the fixture payload."""
    client = Mock()
    client.get_daily_precipitation.return_value = chirps_payload
    return client


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring API access"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
