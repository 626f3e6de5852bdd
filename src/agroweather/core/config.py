"""
Configuration module for agroclimatic indicator estimation.

Loads configuration from JSON file and environment variables.
"""

import copy
import json
import os
from typing import Dict, Any, Optional
from pathlib import Path

from . import constants


PROVIDER_NAMES = ("daymet", "power", "chirps")
STRATEGY_NAMES = ("full_season", "even", "milestone", "year", "year_month")

DEFAULT_BASE_URLS = {
    "daymet": "https://daymet.ornl.gov/single-pixel/api",
    "power": "https://power.larc.nasa.gov/api/temporal/daily",
    "chirps": "https://climateserv.servirglobal.net/api",
}


class Config:
    """Configuration manager for the application."""

    def __init__(self, config_file: Optional[str] = None, _data: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration JSON file. If None, uses CONFIG_FILE env var
                        or defaults to 'config.json'
        """
        self.config_file = config_file or os.getenv("CONFIG_FILE", "config.json")
        self.config: Dict[str, Any] = {}
        if _data is None:
            self._load_config()
        else:
            self.config = copy.deepcopy(_data)
        self._override_from_env()
        self._validate_config()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """
        Build configuration from an in-memory dictionary.

        Environment overrides and validation still apply.
        """
        return cls(config_file="<dict>", _data=data)

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        with open(config_path, "r", encoding="utf-8") as f:
            self.config = json.load(f)

    def _override_from_env(self) -> None:
        """Override configuration with environment variables."""
        if os.getenv("WEATHER_PROVIDER"):
            self.config.setdefault("provider", {})["name"] = os.getenv("WEATHER_PROVIDER")

        if os.getenv("INTERVAL_STRATEGY"):
            self.config.setdefault("pipeline", {})["strategy"] = os.getenv("INTERVAL_STRATEGY")

        if os.getenv("OUTPUT_DIR"):
            self.config.setdefault("output", {})["directory"] = os.getenv("OUTPUT_DIR")

        if os.getenv("LOG_LEVEL"):
            self.config.setdefault("logging", {})["level"] = os.getenv("LOG_LEVEL")

        if os.getenv("LOG_FILE"):
            self.config.setdefault("logging", {})["file"] = os.getenv("LOG_FILE")

        # Environment
        if os.getenv("ENVIRONMENT"):
            self.config["environment"] = os.getenv("ENVIRONMENT")

    def _validate_config(self) -> None:
        """Validate provider, strategy and interval settings."""
        errors = []

        if self.provider_name not in PROVIDER_NAMES:
            errors.append(
                f"Unknown provider '{self.provider_name}' "
                f"(expected one of: {', '.join(PROVIDER_NAMES)})"
            )

        if self.interval_strategy not in STRATEGY_NAMES:
            errors.append(
                f"Unknown interval strategy '{self.interval_strategy}' "
                f"(expected one of: {', '.join(STRATEGY_NAMES)})"
            )

        if self.days_prior_planting < 0:
            errors.append(
                f"pipeline.days_prior_planting must be >= 0, got {self.days_prior_planting}"
            )

        if self.n_intervals < 1:
            errors.append(f"pipeline.n_intervals must be >= 1, got {self.n_intervals}")

        if self.max_workers < 1:
            errors.append(f"pipeline.max_workers must be >= 1, got {self.max_workers}")

        if errors:
            raise ValueError("Invalid configuration: " + "; ".join(errors))

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'pipeline.n_intervals')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def update(self, overrides: Dict[str, Any]) -> None:
        """
        Set values by dotted key and re-validate; ``None`` values are skipped.

        Args:
            overrides: Mapping such as {'pipeline.strategy': 'milestone'}

        Raises:
            ValueError: If the updated configuration is invalid
        """
        for key, value in overrides.items():
            if value is None:
                continue
            *parents, leaf = key.split(".")
            section = self.config
            for k in parents:
                section = section.setdefault(k, {})
            section[leaf] = value
        self._validate_config()

    @property
    def provider_name(self) -> str:
        """Get the selected provider name."""
        return str(self.get("provider.name", "daymet")).lower()

    def provider_base_url(self, name: Optional[str] = None) -> str:
        """Get the base URL for a provider (defaults to the selected one)."""
        name = name or self.provider_name
        return self.get(f"provider.base_urls.{name}", DEFAULT_BASE_URLS.get(name, ""))

    @property
    def provider_timeout(self) -> int:
        """Get HTTP request timeout in seconds."""
        return self.get("provider.timeout", 60)

    @property
    def provider_max_retries(self) -> int:
        """Get transport-level retry attempts (0 disables retries)."""
        return self.get("provider.max_retries", 0)

    @property
    def provider_verify_ssl(self) -> bool:
        """Get SSL verification setting."""
        return self.get("provider.verify_ssl", True)

    @property
    def interval_strategy(self) -> str:
        """Get interval strategy name."""
        return str(self.get("pipeline.strategy", "even")).lower()

    @property
    def n_intervals(self) -> int:
        """Get number of evenly spaced intervals."""
        return int(self.get("pipeline.n_intervals", constants.DEFAULT_N_INTERVALS))

    @property
    def days_prior_planting(self) -> int:
        """Get days-prior-planting lookback."""
        return int(self.get("pipeline.days_prior_planting", constants.DEFAULT_DAYS_PRIOR_PLANTING))

    @property
    def max_workers(self) -> int:
        """Get number of parallel site fetches."""
        return int(self.get("pipeline.max_workers", constants.DEFAULT_MAX_WORKERS))

    @property
    def fetch_timeout(self) -> float:
        """Get per-site bounded wait for a provider fetch, in seconds."""
        return float(self.get("pipeline.fetch_timeout", constants.DEFAULT_FETCH_TIMEOUT))

    @property
    def strict(self) -> bool:
        """Whether derivation/aggregation errors abort the run."""
        return bool(self.get("pipeline.strict", False))

    @property
    def extreme_precipitation_mm(self) -> float:
        """Get extreme precipitation threshold."""
        return float(self.get(
            "thresholds.extreme_precipitation_mm", constants.EXTREME_PRECIPITATION_MM
        ))

    @property
    def extreme_temperature_c(self) -> float:
        """Get extreme temperature threshold."""
        return float(self.get(
            "thresholds.extreme_temperature_c", constants.EXTREME_TEMPERATURE_C
        ))

    @property
    def output_directory(self) -> Optional[str]:
        """Get output directory, if any."""
        return self.get("output.directory")

    @property
    def output_delimiter(self) -> str:
        """Get delimiter for exported tables."""
        return self.get("output.delimiter", ",")

    @property
    def log_level(self) -> str:
        """Get logging level."""
        return self.get("logging.level", "INFO")

    @property
    def log_file(self) -> Optional[str]:
        """Get log file path."""
        return self.get("logging.file")

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"Config(file={self.config_file}, provider={self.provider_name}, "
            f"strategy={self.interval_strategy}, env={self.get('environment')})"
        )
