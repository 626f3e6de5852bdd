"""
Pipeline driver.

Runs adapter -> validation -> derivation -> intervals -> aggregation for
each site of a batch. Provider fetches run in a thread pool; a failing or
slow site is reported in the batch manifest without blocking the others.
"""

import logging
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Union, TYPE_CHECKING

from .algorithms import DerivedVariableEngine
from .core import constants, get_site_logger, LoggerContext
from .core.exceptions import AgroWeatherError, DataValidityError, ProviderFetchError
from .models import (
    BatchResult, CANONICAL_FIELDS, DailyRecord, FailureRecord, Site, SiteStatus, SummaryRow
)
from .processing import (
    DataValidator, IntervalAggregator, IntervalGenerator, IntervalStrategy, LOOKBACK_NAME
)
from .providers import ProviderAdapter, get_adapter
from .services import DataWriter

if TYPE_CHECKING:
    from .core.config import Config


@dataclass
class SiteResult:
    """Everything one site contributes to a batch."""

    site_id: str
    records: List[DailyRecord] = field(default_factory=list)
    summaries: List[SummaryRow] = field(default_factory=list)
    failures: List[FailureRecord] = field(default_factory=list)


class PipelineDriver:
    """Process a batch of sites with one provider adapter and interval strategy."""

    def __init__(
        self,
        adapter: ProviderAdapter,
        strategy: IntervalStrategy,
        engine: Optional[DerivedVariableEngine] = None,
        max_workers: int = constants.DEFAULT_MAX_WORKERS,
        fetch_timeout: float = constants.DEFAULT_FETCH_TIMEOUT,
        strict: bool = False,
        output_delimiter: str = ",",
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline driver.

        Args:
            adapter: Provider adapter used for every site
            strategy: Interval strategy
            engine: Derived-variable engine (default thresholds if None)
            max_workers: Parallel site fetches
            fetch_timeout: Bounded wait for each site's fetch, in seconds
            strict: Abort on the first derivation or aggregation failure
            output_delimiter: Delimiter for exported tables
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.adapter = adapter
        self.strategy = strategy
        self.engine = engine or DerivedVariableEngine(logger=self.logger)
        self.max_workers = max_workers
        self.fetch_timeout = fetch_timeout
        self.strict = strict
        self.output_delimiter = output_delimiter

        self.validator = DataValidator(self.logger)
        self.generator = IntervalGenerator(self.logger)
        self.aggregator = IntervalAggregator(adapter.available_fields, self.logger)

    @classmethod
    def from_config(
        cls,
        config: "Config",
        adapter: Optional[ProviderAdapter] = None,
        logger: Optional[logging.Logger] = None
    ) -> "PipelineDriver":
        """Build a driver (and, unless given, its adapter) from configuration."""
        logger = logger or logging.getLogger(__name__)
        adapter = adapter or get_adapter(config.provider_name, config, logger)
        strategy = IntervalStrategy.from_name(
            config.interval_strategy,
            n_intervals=config.n_intervals,
            days_prior=config.days_prior_planting
        )
        engine = DerivedVariableEngine(
            extreme_precipitation_mm=config.extreme_precipitation_mm,
            extreme_temperature_c=config.extreme_temperature_c,
            logger=logger
        )
        return cls(
            adapter=adapter,
            strategy=strategy,
            engine=engine,
            max_workers=config.max_workers,
            fetch_timeout=config.fetch_timeout,
            strict=config.strict,
            output_delimiter=config.output_delimiter,
            logger=logger
        )

    def fetch_site(self, site: Site) -> List[DailyRecord]:
        """Fetch a site's canonical records over its lookback-extended season."""
        return self.adapter.fetch_and_normalize(
            site, site.lookback_start(self.strategy.days_prior), site.end
        )

    def process_site(self, site: Site, records: List[DailyRecord]) -> SiteResult:
        """
        Validate, enrich, partition and aggregate one site's records.

        Raises:
            DataValidityError: In strict mode, on the first failing day or interval
        """
        site_logger = get_site_logger(self.logger, site.id)
        result = SiteResult(site_id=site.id)

        records = sorted(records, key=lambda r: r.date)
        required = sorted(set(self.adapter.available_fields) & set(CANONICAL_FIELDS))
        if not self.validator.check_data_completeness(records, required):
            site_logger.warning("Daily series is incomplete; affected intervals lack fields")
        result.failures.extend(self.validator.validate_records(records))

        enriched, failures = self.engine.enrich_all(records, site, strict=self.strict)
        result.records = enriched
        result.failures.extend(failures)

        intervals = self.generator.generate(site, self.strategy, enriched)
        if self.strategy.days_prior == 0:
            # Zero-day lookback is empty by construction
            intervals = [i for i in intervals if i.name != LOOKBACK_NAME]
        aggregation = self.aggregator.aggregate(intervals, enriched, strict=self.strict)
        result.summaries = aggregation.rows
        result.failures.extend(aggregation.failures)

        site_logger.info(
            f"{len(enriched)} days, {len(result.summaries)}/{len(intervals)} intervals summarized, "
            f"{len(result.failures)} collected failures"
        )
        return result

    def _fail(
        self,
        site: Site,
        stage: str,
        reason: str,
        batch: BatchResult,
        site_results: Dict[str, SiteResult],
        n_records: int = 0
    ) -> None:
        batch.statuses[site.id] = SiteStatus(
            site.id, success=False, reason=reason, n_records=n_records
        )
        site_results[site.id] = SiteResult(
            site_id=site.id,
            failures=[FailureRecord(site_id=site.id, stage=stage, reason=reason)]
        )

    def _timed_fetch(
        self,
        index: int,
        site: Site,
        started: Dict[int, float]
    ) -> List[DailyRecord]:
        started[index] = time.monotonic()
        return self.fetch_site(site)

    def _await_fetches(
        self,
        futures: List["Future[List[DailyRecord]]"],
        started: Dict[int, float]
    ) -> Set[int]:
        """
        Wait until every fetch has finished or run past ``fetch_timeout``.

        Each deadline counts from the moment that site's own fetch starts, so
        a site queued behind a slow one keeps its full time budget.

        Returns:
            Indices of the sites whose fetch timed out
        """
        index_of = {future: i for i, future in enumerate(futures)}
        pending = set(futures)
        timed_out: Set[int] = set()

        while pending:
            now = time.monotonic()
            for future in list(pending):
                begun = started.get(index_of[future])
                if begun is not None and not future.done() and now - begun >= self.fetch_timeout:
                    pending.discard(future)
                    timed_out.add(index_of[future])
            if not pending:
                break

            deadlines = [
                started[index_of[f]] + self.fetch_timeout for f in pending if index_of[f] in started
            ]
            timeout = min(deadlines) - now if deadlines else constants.FETCH_POLL_INTERVAL
            if len(deadlines) < len(pending):
                # Queued fetches have no deadline yet
                timeout = min(timeout, constants.FETCH_POLL_INTERVAL)
            _, pending = wait(pending, timeout=max(timeout, 0.0), return_when=FIRST_COMPLETED)

        return timed_out

    def _collect(
        self,
        site: Site,
        future: "Future[List[DailyRecord]]",
        batch: BatchResult,
        site_results: Dict[str, SiteResult]
    ) -> None:
        site_logger = get_site_logger(self.logger, site.id)

        try:
            records = future.result()
        except ProviderFetchError as e:
            site_logger.error(f"Provider fetch failed: {e.reason}")
            self._fail(site, "fetch", e.reason, batch, site_results)
            return
        except AgroWeatherError as e:
            site_logger.error(f"Normalization failed: {e}")
            self._fail(site, "normalization", str(e), batch, site_results)
            return
        except Exception as e:
            site_logger.error(f"Unexpected fetch error: {e}", exc_info=True)
            self._fail(site, "fetch", str(e), batch, site_results)
            return

        if not records:
            reason = "provider returned no records in range"
            site_logger.error(reason)
            self._fail(site, "fetch", reason, batch, site_results)
            return

        try:
            site_result = self.process_site(site, records)
        except Exception as e:
            if self.strict and isinstance(e, DataValidityError):
                raise
            site_logger.error(f"Processing failed: {e}", exc_info=True)
            self._fail(site, "processing", str(e), batch, site_results, len(records))
            return

        site_results[site.id] = site_result
        batch.statuses[site.id] = SiteStatus(
            site.id,
            success=True,
            n_records=len(site_result.records),
            n_summaries=len(site_result.summaries)
        )

    def run(
        self,
        sites: Iterable[Site],
        output_dir: Optional[Union[str, Path]] = None
    ) -> BatchResult:
        """
        Process a batch of sites.

        Args:
            sites: Sites to process (results keep this order)
            output_dir: If given, write summary.csv, daily.csv and manifest.json here

        Returns:
            BatchResult with partial results and the failure manifest

        Raises:
            DataValidityError: In strict mode, on the first failing day or interval
        """
        sites = list(sites)
        batch = BatchResult()
        site_results: Dict[str, SiteResult] = {}

        with LoggerContext(self.logger, f"batch of {len(sites)} sites ({self.adapter.name})"):
            executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="fetch"
            )
            try:
                started: Dict[int, float] = {}
                futures = [
                    executor.submit(self._timed_fetch, index, site, started)
                    for index, site in enumerate(sites)
                ]
                timed_out = self._await_fetches(futures, started)

                for index, (site, future) in enumerate(zip(sites, futures)):
                    if index in timed_out:
                        reason = f"fetch timed out after {self.fetch_timeout:g}s"
                        get_site_logger(self.logger, site.id).error(reason)
                        self._fail(site, "fetch", reason, batch, site_results)
                        continue
                    self._collect(site, future, batch, site_results)
            finally:
                executor.shutdown(wait=False, cancel_futures=True)

        for site in sites:
            site_result = site_results.get(site.id)
            if site_result is None:
                continue
            batch.summaries.extend(site_result.summaries)
            batch.daily.extend(site_result.records)
            batch.failures.extend(site_result.failures)

        self.logger.info(
            f"Batch finished: {len(batch.succeeded)} succeeded, {len(batch.failed)} failed, "
            f"{len(batch.summaries)} summary rows"
        )

        if output_dir is not None:
            DataWriter(output_dir, self.output_delimiter, self.logger).write_batch(
                batch, extra=self.settings()
            )

        return batch

    def settings(self) -> Dict[str, Any]:
        """Run settings recorded in the manifest."""
        return {
            "provider": self.adapter.name,
            "strategy": self.strategy.kind.value,
            "n_intervals": self.strategy.n_intervals,
            "days_prior_planting": self.strategy.days_prior,
            "strict": self.strict,
        }

    def close(self) -> None:
        """Close the adapter's HTTP session."""
        self.adapter.api_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
