"""
check_logstash/health/pipeline.py — Per-pipeline rules.

Inflight events, events per minute and config reload are evaluated for every
pipeline in scope. The rule result is the worst pipeline severity and its
message lists each pipeline, e.g.

    Inflight events: main: 12; beats: 0;

Pre-6.0.0 nodes have a single unnamed pipeline, reported without the name:

    Inflight events: 12
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal

from check_logstash.health import HealthResult, Severity, worst
from check_logstash.health.thresholds import Range, outside
from check_logstash.rates import events_per_minute

if TYPE_CHECKING:
    from check_logstash.pipelines import PipelineView
    from check_logstash.settings import Settings
    from check_logstash.state import StateRecord

logger = logging.getLogger(__name__)

Direction = Literal["in", "out"]

INFLIGHT_EVENTS_REPORT = "Inflight events"
EVENTS_PER_MINUTE_REPORT = "Events %s per minute"
CONFIG_RELOAD_REPORT = "Config reload syntax check"
INITIALIZED = "Initialized"

# Stand-ins for reload timestamps the API does not report. A missing failure
# sorts after a missing success, so with neither present any failure counts.
NO_RELOAD_SUCCESS = datetime(1970, 1, 1, tzinfo=UTC)
NO_RELOAD_FAILURE = datetime(1970, 1, 2, tzinfo=UTC)


def events_per_minute_checks(
    views: list[PipelineView],
    state: StateRecord,
    captured_at: float,
    cfg: Settings,
) -> list[HealthResult]:
    """The events-in and events-out rules that have a threshold configured."""
    results = []
    if cfg.checks_events_in_per_minute:
        results.append(
            events_per_minute_health(
                "in",
                views,
                state,
                captured_at,
                cfg.EVENTS_IN_PER_MINUTE_WARN,
                cfg.EVENTS_IN_PER_MINUTE_CRIT,
            )
        )
    if cfg.checks_events_out_per_minute:
        results.append(
            events_per_minute_health(
                "out",
                views,
                state,
                captured_at,
                cfg.EVENTS_OUT_PER_MINUTE_WARN,
                cfg.EVENTS_OUT_PER_MINUTE_CRIT,
            )
        )
    return results


def inflight_events_health(views: list[PipelineView], cfg: Settings) -> HealthResult:
    severities = []
    parts = []
    for view in views:
        inflight = view.inflight_events
        severities.append(
            outside(inflight, cfg.INFLIGHT_EVENTS_WARN, cfg.INFLIGHT_EVENTS_CRIT)
        )
        parts.append(_part(view, str(inflight)))
    return HealthResult(worst(severities), _report(INFLIGHT_EVENTS_REPORT, parts))


def pipeline_rate(
    view: PipelineView,
    state: StateRecord,
    captured_at: float,
    direction: Direction,
) -> int | None:
    """Events per minute since the last run, or None while still initializing."""
    prior = state.get(view.name)
    if prior is None or prior.timestamp == captured_at:
        return None
    if direction == "in":
        return events_per_minute(prior.events_in, prior.timestamp, view.events_in, captured_at)
    return events_per_minute(prior.events_out, prior.timestamp, view.events_out, captured_at)


def events_per_minute_health(
    direction: Direction,
    views: list[PipelineView],
    state: StateRecord,
    captured_at: float,
    warning: Range | None,
    critical: Range | None,
) -> HealthResult:
    severities = []
    parts = []
    for view in views:
        rate = pipeline_rate(view, state, captured_at, direction)
        if rate is None:
            logger.debug("no prior counters for pipeline %s, initializing", view.name)
            parts.append(_part(view, INITIALIZED))
            continue
        severities.append(outside(rate, warning, critical))
        parts.append(_part(view, str(rate)))
    title = EVENTS_PER_MINUTE_REPORT % direction
    return HealthResult(worst(severities), _report(title, parts))


def config_reload_health(views: list[PipelineView]) -> HealthResult:
    severities = []
    parts = []
    for view in views:
        failed = view.reload_failures > 0 and _last_reload_failed(view)
        severities.append(Severity.CRITICAL if failed else Severity.OK)
        parts.append(_part(view, view.last_reload_error_message or "OK"))
    if any(view.legacy for view in views):
        # The full error text is too long for a plugin output line.
        return HealthResult(worst(severities), CONFIG_RELOAD_REPORT)
    return HealthResult(worst(severities), _report(CONFIG_RELOAD_REPORT, parts))


def _last_reload_failed(view: PipelineView) -> bool:
    # Compares timestamps reported by Logstash; skew between the monitored
    # node and whatever set them is not accounted for.
    success = view.last_reload_success_at or NO_RELOAD_SUCCESS
    failure = view.last_reload_failure_at or NO_RELOAD_FAILURE
    return success < failure


def _part(view: PipelineView, text: str) -> str:
    if view.legacy:
        return text
    return f"{view.name}: {text};"


def _report(title: str, parts: list[str]) -> str:
    return " ".join([f"{title}:", *parts])
