"""
Tests for configuration loading.
"""

import json

import pytest  # type: ignore

from src.agroweather.core import Config
from src.agroweather.core.config import DEFAULT_BASE_URLS


ENV_VARS = (
    "CONFIG_FILE", "WEATHER_PROVIDER", "INTERVAL_STRATEGY", "OUTPUT_DIR",
    "LOG_LEVEL", "LOG_FILE", "ENVIRONMENT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "provider": {"name": "chirps", "timeout": 30},
        "pipeline": {"strategy": "milestone", "days_prior_planting": 15},
        "output": {"directory": "out", "delimiter": ";"},
    }))
    return path


class TestConfig:
    """Test cases for Config."""

    def test_defaults(self):
        config = Config.from_dict({})
        assert config.provider_name == "daymet"
        assert config.interval_strategy == "even"
        assert config.n_intervals == 4
        assert config.days_prior_planting == 0
        assert config.provider_max_retries == 0
        assert config.strict is False
        assert config.extreme_precipitation_mm == 25.0
        assert config.extreme_temperature_c == 30.0
        assert config.output_directory is None
        assert config.output_delimiter == ","

    def test_load_file(self, config_file):
        config = Config(str(config_file))
        assert config.provider_name == "chirps"
        assert config.provider_timeout == 30
        assert config.interval_strategy == "milestone"
        assert config.days_prior_planting == 15
        assert config.output_directory == "out"
        assert config.output_delimiter == ";"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(str(tmp_path / "missing.json"))

    def test_env_overrides(self, config_file, monkeypatch):
        monkeypatch.setenv("WEATHER_PROVIDER", "power")
        monkeypatch.setenv("INTERVAL_STRATEGY", "year_month")
        monkeypatch.setenv("OUTPUT_DIR", "/tmp/results")

        config = Config(str(config_file))

        assert config.provider_name == "power"
        assert config.interval_strategy == "year_month"
        assert config.output_directory == "/tmp/results"

    def test_dot_notation(self, config_file):
        config = Config(str(config_file))
        assert config.get("provider.timeout") == 30
        assert config.get("provider.nothing.here", "fallback") == "fallback"

    def test_base_urls(self):
        config = Config.from_dict({"provider": {"base_urls": {"power": "http://localhost:9000"}}})
        assert config.provider_base_url("power") == "http://localhost:9000"
        assert config.provider_base_url("daymet") == DEFAULT_BASE_URLS["daymet"]

    @pytest.mark.parametrize("data", [
        {"provider": {"name": "era5"}},
        {"pipeline": {"strategy": "weekly"}},
        {"pipeline": {"n_intervals": 0}},
        {"pipeline": {"days_prior_planting": -3}},
        {"pipeline": {"max_workers": 0}},
    ])
    def test_invalid(self, data):
        with pytest.raises(ValueError):
            Config.from_dict(data)

    def test_update(self):
        config = Config.from_dict({})
        config.update({"pipeline.strategy": "milestone", "pipeline.n_intervals": None})
        assert config.interval_strategy == "milestone"
        assert config.n_intervals == 4

    def test_update_revalidates(self):
        config = Config.from_dict({})
        with pytest.raises(ValueError):
            config.update({"pipeline.n_intervals": 0})

    def test_from_dict_copies(self):
        data = {"pipeline": {"strategy": "even"}}
        config = Config.from_dict(data)
        config.update({"pipeline.strategy": "year"})
        assert data["pipeline"]["strategy"] == "even"
