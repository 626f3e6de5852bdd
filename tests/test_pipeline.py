"""
Tests for the pipeline driver.

Runs whole batches against recorded provider payloads through mocked HTTP
clients, including failing and slow sites.
"""

import copy
import time
from datetime import date
from unittest.mock import Mock

import pytest  # type: ignore
import requests  # type: ignore

from src.agroweather.core import Config
from src.agroweather.core.exceptions import DataValidityError
from src.agroweather.models import Site
from src.agroweather.pipeline import PipelineDriver
from src.agroweather.processing import IntervalStrategy, StrategyKind
from src.agroweather.providers import ChirpsAdapter, DaymetAdapter, PowerAdapter


def make_site(site_id, latitude, milestones=()):
    return Site(
        id=site_id, crop="maize", name=site_id, latitude=latitude, longitude=-89.3,
        start=date(2018, 5, 1), end=date(2018, 5, 31), milestones=tuple(milestones),
    )


@pytest.fixture
def sites():
    return [
        make_site("ARL", 43.3091, [date(2018, 5, 8), date(2018, 5, 20)]),
        make_site("HAN", 44.1197, [date(2018, 5, 15)]),
    ]


def driver_for(adapter, kind=StrategyKind.MILESTONE, days_prior=5, **kwargs):
    return PipelineDriver(
        adapter=adapter,
        strategy=IntervalStrategy(kind, n_intervals=4, days_prior=days_prior),
        logger=Mock(),
        **kwargs
    )


class TestPipelineDriver:
    """Test cases for batch runs."""

    def test_full_success(self, daymet_client, sites):
        driver = driver_for(DaymetAdapter(daymet_client, logger=Mock()))

        result = driver.run(sites)

        assert result.is_complete
        assert result.succeeded == ["ARL", "HAN"]
        # ARL: lookback + 3 stages, HAN: lookback + 2 stages
        assert [(r.site_id, r.label) for r in result.summaries] == [
            ("ARL", "A"), ("ARL", "B"), ("ARL", "C"), ("ARL", "D"),
            ("HAN", "A"), ("HAN", "B"), ("HAN", "C"),
        ]
        assert result.statuses["ARL"].n_records == 36
        assert len(result.daily) == 72

    def test_daily_records_are_enriched(self, daymet_client, sites):
        driver = driver_for(DaymetAdapter(daymet_client, logger=Mock()))
        result = driver.run(sites[:1])

        assert all(r.et0 is not None and r.et0 > 0 for r in result.daily)
        assert all(r.gdu is not None for r in result.daily)
        dates = [r.date for r in result.daily]
        assert dates == sorted(dates)

    def test_missing_provider_field_is_reported(self, daymet_client, sites):
        # The fixture has a snow water equivalent fill value on 2018-05-10
        driver = driver_for(DaymetAdapter(daymet_client, logger=Mock()))

        result = driver.run(sites[:1])

        messages = [str(c.args[1]) for c in driver.logger.log.call_args_list if len(c.args) > 1]
        assert any("incomplete" in message for message in messages)
        assert result.is_complete

    def test_interval_sums_match_daily_records(self, daymet_client, sites):
        driver = driver_for(DaymetAdapter(daymet_client, logger=Mock()))
        result = driver.run(sites[:1])

        stage = next(r for r in result.summaries if r.label == "C")
        days = [r for r in result.daily if stage.start <= r.date < stage.end]
        assert stage.duration == 12
        assert stage.precipitation == pytest.approx(sum(r.precipitation for r in days))
        assert stage.et0 == pytest.approx(sum(r.et0 for r in days))

    def test_one_site_failure_does_not_block_others(self, daymet_payload, sites):
        def get_daily(latitude, longitude, years):
            if latitude == 44.1197:
                raise requests.exceptions.ConnectionError("connection refused")
            return daymet_payload

        client = Mock()
        client.get_daily.side_effect = get_daily
        driver = driver_for(DaymetAdapter(client, logger=Mock()))

        result = driver.run(sites)

        assert result.succeeded == ["ARL"]
        assert result.failed == ["HAN"]
        assert "connection refused" in result.statuses["HAN"].reason
        assert {r.site_id for r in result.summaries} == {"ARL"}
        assert [(f.site_id, f.stage) for f in result.failures] == [("HAN", "fetch")]
        assert not result.is_complete

    def test_slow_site_times_out(self, daymet_payload, sites):
        def get_daily(latitude, longitude, years):
            if latitude == 44.1197:
                time.sleep(1.0)
            return daymet_payload

        client = Mock()
        client.get_daily.side_effect = get_daily
        driver = driver_for(DaymetAdapter(client, logger=Mock()), fetch_timeout=0.2, max_workers=2)

        result = driver.run(sites)

        assert result.succeeded == ["ARL"]
        assert "timed out" in result.statuses["HAN"].reason

    def test_queued_site_is_timed_from_its_own_start(self, daymet_payload):
        slow, fast = make_site("SLOW", 44.1197), make_site("FAST", 43.3091)

        def get_daily(latitude, longitude, years):
            if latitude == 44.1197:
                time.sleep(1.5)
            return daymet_payload

        client = Mock()
        client.get_daily.side_effect = get_daily
        driver = driver_for(DaymetAdapter(client, logger=Mock()), fetch_timeout=0.5, max_workers=1)

        result = driver.run([slow, fast])

        assert result.failed == ["SLOW"]
        assert "timed out" in result.statuses["SLOW"].reason
        assert result.succeeded == ["FAST"]
        assert {r.site_id for r in result.summaries} == {"FAST"}

    def test_schema_mismatch_fails_site(self, sites):
        client = Mock()
        client.get_daily.return_value = {"metadata": {}}
        driver = driver_for(DaymetAdapter(client, logger=Mock()))

        result = driver.run(sites[:1])

        assert result.failed == ["ARL"]
        assert result.failures[0].stage == "normalization"

    def test_zero_lookback_is_not_summarized(self, daymet_client, sites):
        driver = driver_for(
            DaymetAdapter(daymet_client, logger=Mock()), kind=StrategyKind.EVEN, days_prior=0
        )

        result = driver.run(sites[:1])

        assert result.is_complete
        assert [r.label for r in result.summaries] == ["B", "C", "D", "E"]
        assert sum(r.duration for r in result.summaries) == 31

    def test_invalid_day_is_collected(self, daymet_payload, sites):
        payload = copy.deepcopy(daymet_payload)
        data = payload["data"]
        i = data["yday"].index(125)
        data["tmax (deg c)"][i], data["tmin (deg c)"][i] = 5.0, 15.0
        client = Mock()
        client.get_daily.return_value = payload
        driver = driver_for(DaymetAdapter(client, logger=Mock()))

        result = driver.run(sites[:1])

        assert result.succeeded == ["ARL"]
        stages = sorted({f.stage for f in result.failures})
        assert stages == ["derivation", "validation"]
        assert all(f.key == "2018-05-05" for f in result.failures)
        bad_day = next(r for r in result.daily if r.date == date(2018, 5, 5))
        assert bad_day.et0 is None
        stage = next(r for r in result.summaries if r.label == "B")
        assert stage.et0 is None
        assert stage.precipitation is not None

    def test_strict_mode_raises(self, daymet_payload, sites):
        payload = copy.deepcopy(daymet_payload)
        data = payload["data"]
        i = data["yday"].index(125)
        data["tmax (deg c)"][i], data["tmin (deg c)"][i] = 5.0, 15.0
        client = Mock()
        client.get_daily.return_value = payload
        driver = driver_for(DaymetAdapter(client, logger=Mock()), strict=True)

        with pytest.raises(DataValidityError):
            driver.run(sites[:1])

    def test_precipitation_only_provider(self, chirps_client, sites):
        driver = driver_for(
            ChirpsAdapter(chirps_client, logger=Mock()), kind=StrategyKind.FULL_SEASON, days_prior=0
        )

        result = driver.run([make_site("ARL", 43.3091)])

        # Fixture ends 2018-05-10, so the season has 10 observed days
        row = result.summaries[0]
        assert row.duration == 10
        assert row.t_mean is None
        assert row.et0 is None
        assert row.sdi is not None

    def test_writes_outputs(self, daymet_client, sites, tmp_path):
        driver = driver_for(DaymetAdapter(daymet_client, logger=Mock()))

        driver.run(sites, output_dir=tmp_path)

        assert (tmp_path / "summary.csv").exists()
        assert (tmp_path / "daily.csv").exists()
        assert (tmp_path / "manifest.json").exists()

    def test_close_releases_session(self, daymet_client):
        with driver_for(DaymetAdapter(daymet_client, logger=Mock())):
            pass
        daymet_client.close.assert_called_once()


class TestPipelineFromConfig:
    """Test building a driver from configuration."""

    def test_from_config(self, monkeypatch):
        for name in ("WEATHER_PROVIDER", "INTERVAL_STRATEGY"):
            monkeypatch.delenv(name, raising=False)
        config = Config.from_dict({
            "provider": {"name": "power"},
            "pipeline": {"strategy": "milestone", "days_prior_planting": 30, "max_workers": 2},
            "thresholds": {"extreme_temperature_c": 32.0},
        })

        driver = PipelineDriver.from_config(config, logger=Mock())

        assert isinstance(driver.adapter, PowerAdapter)
        assert driver.strategy.kind is StrategyKind.MILESTONE
        assert driver.strategy.days_prior == 30
        assert driver.max_workers == 2
        assert driver.engine.extreme_temperature_c == 32.0
        driver.close()
