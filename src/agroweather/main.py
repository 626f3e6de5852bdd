"""
Main entry point for the agroweather pipeline.

Loads sites, fetches daily weather from the configured provider and writes
per-interval agroclimatic summaries.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .core import Config, setup_logger_from_config, LoggerContext
from .models import BatchResult
from .pipeline import PipelineDriver
from .services import SiteRegistry


EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2


class AgroWeatherApp:
    """Main application for agroclimatic indicator estimation."""

    def __init__(
        self,
        config_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file. Without one, defaults apply.
            overrides: Dotted-key settings taking precedence over the file
        """
        if config_file is None and not Path(os.getenv("CONFIG_FILE", "config.json")).exists():
            self.config = Config.from_dict({})
        else:
            self.config = Config(config_file)
        if overrides:
            self.config.update(overrides)

        self.logger = setup_logger_from_config(self.config)
        self.logger.info("=" * 60)
        self.logger.info("Agroclimatic Indicator Pipeline")
        self.logger.info("=" * 60)
        self.logger.info(f"Configuration: {self.config}")

    def load_sites(self, sites_file: str) -> SiteRegistry:
        """Load the site registry from a delimited file."""
        with LoggerContext(self.logger, f"loading sites from {sites_file}"):
            return SiteRegistry.from_csv(sites_file, logger=self.logger)

    def run(self, sites_file: str) -> BatchResult:
        """
        Run the pipeline for every site in a file.

        Args:
            sites_file: Site registry file

        Returns:
            Batch result (also written to the configured output directory)
        """
        registry = self.load_sites(sites_file)

        try:
            with PipelineDriver.from_config(self.config, logger=self.logger) as driver:
                result = driver.run(registry, output_dir=self.config.output_directory)
        except Exception as e:
            self.logger.error(f"Application error: {e}", exc_info=True)
            raise

        self.log_summary(result)
        return result

    def log_summary(self, result: BatchResult) -> None:
        """Log the per-site outcome of a batch."""
        self.logger.info("=" * 60)
        self.logger.info("Batch Summary")
        self.logger.info("=" * 60)
        self.logger.info(f"Sites succeeded: {len(result.succeeded)}")
        self.logger.info(f"Sites failed: {len(result.failed)}")
        self.logger.info(f"Summary rows: {len(result.summaries)}")

        if result.failed:
            self.logger.warning("Failed sites:")
            for site_id in result.failed:
                self.logger.warning(f"  - {site_id}: {result.statuses[site_id].reason}")

        if result.failures:
            self.logger.warning(f"Collected failures: {len(result.failures)}")

        self.logger.info("=" * 60)


def exit_code(result: BatchResult) -> int:
    """0 when everything succeeded, 2 on partial success."""
    return EXIT_SUCCESS if result.is_complete else EXIT_PARTIAL


def main(argv=None):
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Agroclimatic indicators from daily provider weather"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--sites",
        type=str,
        required=True,
        help="Site registry file (site_id,crop,name,latitude,longitude,start,end,milestones...)"
    )
    parser.add_argument(
        "--provider",
        choices=["daymet", "power", "chirps"],
        default=None,
        help="Weather provider"
    )
    parser.add_argument(
        "--strategy",
        choices=["full_season", "even", "milestone", "year", "year_month"],
        default=None,
        help="Interval strategy"
    )
    parser.add_argument(
        "--intervals",
        type=int,
        default=None,
        help="Number of even intervals. Default: 4"
    )
    parser.add_argument(
        "--dpp",
        type=int,
        default=None,
        help="Days prior planting included as a lookback interval. Default: 0"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Abort on the first derivation or aggregation failure"
    )

    args = parser.parse_args(argv)

    overrides = {
        "provider.name": args.provider,
        "pipeline.strategy": args.strategy,
        "pipeline.n_intervals": args.intervals,
        "pipeline.days_prior_planting": args.dpp,
        "pipeline.strict": args.strict,
        "output.directory": args.output,
    }

    try:
        app = AgroWeatherApp(config_file=args.config, overrides=overrides)
        result = app.run(args.sites)
    except Exception as e:
        print(f"Application failed: {e}")
        sys.exit(EXIT_FATAL)

    sys.exit(exit_code(result))


if __name__ == "__main__":
    main()
