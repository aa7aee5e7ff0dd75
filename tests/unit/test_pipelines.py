"""Unit tests for the layout adapter (check_logstash.pipelines)."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from check_logstash.errors import InvalidField
from check_logstash.pipelines import PipelineView, is_multi_pipeline, pipeline_views
from check_logstash.snapshot import Snapshot


class TestVersionGate:
    @pytest.mark.parametrize("version", ["6.0.0", "6.0.0.1", "6.8.23", "7.17.9", "8.13.0", "10.0.0"])
    def test_multi_pipeline(self, version):
        assert is_multi_pipeline(version)

    @pytest.mark.parametrize("version", ["5.6.3", "5.0.0", "2.4", "6.0.0-beta2", "6.0.0-rc1", "6.0.0.beta2"])
    def test_legacy(self, version):
        assert not is_multi_pipeline(version)

    def test_unparseable_version(self):
        with pytest.raises(InvalidField):
            is_multi_pipeline("unknown")


class TestNamedPipelines:
    def test_monitoring_pipeline_is_skipped(self, modern_stats):
        views = pipeline_views(Snapshot(modern_stats, captured_at=0.0))
        assert [v.name for v in views] == ["main", "beats"]

    def test_counters(self, modern_stats):
        main = pipeline_views(Snapshot(modern_stats, captured_at=0.0))[0]
        assert main == PipelineView(
            name="main",
            events_in=1000,
            events_out=990,
            reload_failures=0,
            last_reload_error_message="",
        )
        assert main.inflight_events == 10

    def test_reload_error_message_is_stripped(self, modern_stats):
        modern_stats["pipelines"]["beats"]["reloads"]["failures"] = 1
        modern_stats["pipelines"]["beats"]["reloads"]["last_error"] = {
            "message": "  Expected one of #, input  \n",
            "backtrace": [],
        }
        beats = pipeline_views(Snapshot(modern_stats, captured_at=0.0))[1]
        assert beats.reload_failures == 1
        assert beats.last_reload_error_message == "Expected one of #, input"

    def test_reload_timestamps_are_not_read(self, modern_stats):
        main = pipeline_views(Snapshot(modern_stats, captured_at=0.0))[0]
        assert main.last_reload_success_at is None
        assert main.last_reload_failure_at is None

    def test_null_counter_counts_as_zero(self, modern_stats):
        modern_stats["pipelines"]["beats"]["events"]["out"] = None
        beats = pipeline_views(Snapshot(modern_stats, captured_at=0.0))[1]
        assert beats.events_out == 0

    def test_missing_counter_is_fatal(self, modern_stats):
        del modern_stats["pipelines"]["main"]["events"]["in"]
        with pytest.raises(InvalidField, match="pipelines.main.events.in"):
            pipeline_views(Snapshot(modern_stats, captured_at=0.0))

    def test_no_pipelines_besides_monitoring(self, modern_stats):
        modern_stats["pipelines"] = {
            ".monitoring-logstash": modern_stats["pipelines"][".monitoring-logstash"]
        }
        assert pipeline_views(Snapshot(modern_stats, captured_at=0.0)) == []


class TestLegacyPipeline:
    def test_single_main_view(self, legacy_stats):
        views = pipeline_views(Snapshot(legacy_stats, captured_at=0.0))
        assert len(views) == 1
        main = views[0]
        assert main.name == "main"
        assert main.legacy
        assert (main.events_in, main.events_out) == (500, 480)

    def test_inflight_is_out_minus_in(self, legacy_stats):
        main = pipeline_views(Snapshot(legacy_stats, captured_at=0.0))[0]
        assert main.inflight_events == -20

    def test_inflight_orderings_differ_between_layouts(self):
        legacy = PipelineView("main", 480, 500, 0, "", legacy=True)
        modern = PipelineView("main", 480, 500, 0, "")
        assert legacy.inflight_events == 20
        assert modern.inflight_events == -20

    def test_reload_timestamps_are_parsed(self, legacy_stats):
        reloads = legacy_stats["pipeline"]["reloads"]
        reloads["last_success_timestamp"] = "2024-06-01T10:00:00.000Z"
        reloads["last_failure_timestamp"] = "2024-06-01T11:30:00+02:00"
        main = pipeline_views(Snapshot(legacy_stats, captured_at=0.0))[0]
        assert main.last_reload_success_at == datetime(2024, 6, 1, 10, tzinfo=UTC)
        assert main.last_reload_failure_at == datetime(2024, 6, 1, 9, 30, tzinfo=UTC)

    def test_naive_timestamp_is_utc(self, legacy_stats):
        legacy_stats["pipeline"]["reloads"]["last_failure_timestamp"] = "2024-06-01T10:00:00"
        main = pipeline_views(Snapshot(legacy_stats, captured_at=0.0))[0]
        assert main.last_reload_failure_at == datetime(2024, 6, 1, 10, tzinfo=UTC)

    def test_garbage_timestamp_is_fatal(self, legacy_stats):
        legacy_stats["pipeline"]["reloads"]["last_success_timestamp"] = "yesterday"
        with pytest.raises(InvalidField, match="last_success_timestamp"):
            pipeline_views(Snapshot(legacy_stats, captured_at=0.0))
