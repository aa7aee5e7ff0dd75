"""
check_logstash/check.py — One evaluation cycle of the Logstash check.

Stages:
  1. Fetch           (GET /_node/stats → Snapshot)
  2. Load state      (prior counters, only when an events/minute rule is set)
  3. Evaluate        (process rules once, pipeline rules per pipeline)
  4. Save state      (current counters overwrite the file)

Importable (used by the CLI and tests):
    from check_logstash.check import run_check, evaluate, render
    outcome = run_check(cfg)
    print(render(outcome))
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from check_logstash.fetch import fetch
from check_logstash.health import HealthResult, Severity, summarize, worst
from check_logstash.health import pipeline as health_pipeline
from check_logstash.health import process as health_process
from check_logstash.perfdata import performance_data
from check_logstash.pipelines import PipelineView, pipeline_views
from check_logstash.settings import Settings
from check_logstash.snapshot import Snapshot
from check_logstash.state import (
    StateRecord,
    load_state,
    record_from_views,
    save_state,
    state_path,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckOutcome:
    results: list[HealthResult]
    perfdata: str

    @property
    def severity(self) -> Severity:
        return worst(r.severity for r in self.results)

    @property
    def exit_code(self) -> int:
        return int(self.severity)


def evaluate(
    snapshot: Snapshot,
    views: list[PipelineView],
    state: StateRecord,
    cfg: Settings,
) -> list[HealthResult]:
    """Run every rule in report order and return one result per rule."""
    return [
        health_process.file_descriptor_health(snapshot, cfg),
        health_process.heap_health(snapshot, cfg),
        health_pipeline.inflight_events_health(views, cfg),
        health_pipeline.config_reload_health(views),
        health_process.cpu_usage_health(snapshot, cfg),
        *health_pipeline.events_per_minute_checks(views, state, snapshot.captured_at, cfg),
    ]


def run_check(
    cfg: Settings,
    clock: Callable[[], float] = time.time,
) -> CheckOutcome:
    snapshot = fetch(cfg, clock=clock)
    views = pipeline_views(snapshot)

    path = state_path(cfg.TEMP_FILEDIR, cfg.HOSTNAME, cfg.PORT, cfg.PIPELINE)
    state: StateRecord = load_state(path) if cfg.needs_state else {}

    results = evaluate(snapshot, views, state, cfg)
    perfdata = performance_data(snapshot, views, state, cfg)

    if cfg.needs_state:
        save_state(path, record_from_views(views, snapshot.captured_at))

    outcome = CheckOutcome(results, perfdata)
    logger.debug("evaluated %d rule(s), overall %s", len(results), outcome.severity.label)
    return outcome


def render(outcome: CheckOutcome) -> str:
    """Status line with perfdata, then every result, worst first."""
    status = summarize(outcome.results)
    ranked = sorted(outcome.results, key=lambda r: r.severity, reverse=True)
    lines = [f"{status} | {outcome.perfdata}"]
    lines.extend(str(r) for r in ranked)
    return "\n".join(lines)
