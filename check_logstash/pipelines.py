"""
check_logstash/pipelines.py — Normalize the two node stats layouts.

Logstash 6.0.0 introduced named pipelines. Older releases report a single
unnamed pipeline under ``pipeline``; newer ones a map under ``pipelines``.
pipeline_views() resolves the layout once per run so the health rules only
ever see a list of PipelineView records.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime

from check_logstash.errors import InvalidField
from check_logstash.snapshot import Snapshot, Value, as_int

logger = logging.getLogger(__name__)

MULTI_PIPELINE_VERSION = (6, 0, 0)
MONITORING_PIPELINE = ".monitoring-logstash"
LEGACY_PIPELINE_NAME = "main"

_VERSION_RE = re.compile(r"^\s*(\d+)(?:\.(\d+))?(?:\.(\d+))?(.*)$")


@dataclass(frozen=True)
class PipelineView:
    name: str
    events_in: int
    events_out: int
    reload_failures: int
    last_reload_error_message: str
    last_reload_success_at: datetime | None = None
    last_reload_failure_at: datetime | None = None
    legacy: bool = False

    @property
    def inflight_events(self) -> int:
        # Pre-6.0.0 releases have always been checked as out - in.
        if self.legacy:
            return self.events_out - self.events_in
        return self.events_in - self.events_out


def is_multi_pipeline(version: str) -> bool:
    """True for 6.0.0 and later. Pre-releases of 6.0.0 sort before it."""
    match = _VERSION_RE.match(version)
    if match is None:
        raise InvalidField("version")
    major, minor, patch, suffix = match.groups()
    release = (int(major), int(minor or 0), int(patch or 0))
    if release == MULTI_PIPELINE_VERSION and _is_prerelease(suffix):
        return False
    return release >= MULTI_PIPELINE_VERSION


def _is_prerelease(suffix: str) -> bool:
    # "6.0.0-rc1" and "6.0.0.beta2" precede 6.0.0; "6.0.0.1" follows it.
    suffix = suffix.strip()
    return suffix.startswith("-") or suffix.lstrip(".")[:1].isalpha()


def pipeline_views(snapshot: Snapshot) -> list[PipelineView]:
    if is_multi_pipeline(snapshot.version):
        return _named_pipelines(snapshot)
    return [_legacy_pipeline(snapshot)]


def _named_pipelines(snapshot: Snapshot) -> list[PipelineView]:
    pipelines = snapshot.get("pipelines")
    if not isinstance(pipelines, Mapping):
        raise InvalidField("pipelines")
    views = []
    for name in pipelines:
        if name == MONITORING_PIPELINE:
            continue
        prefix = f"pipelines.{name}"
        views.append(
            PipelineView(
                name=name,
                events_in=as_int(snapshot.get(f"{prefix}.events.in")),
                events_out=as_int(snapshot.get(f"{prefix}.events.out")),
                reload_failures=as_int(snapshot.get(f"{prefix}.reloads.failures")),
                last_reload_error_message=_as_text(
                    snapshot.get(f"{prefix}.reloads.last_error.message")
                ),
            )
        )
    logger.debug("multi-pipeline snapshot, pipelines: %s", [v.name for v in views])
    return views


def _legacy_pipeline(snapshot: Snapshot) -> PipelineView:
    logger.debug("legacy single-pipeline snapshot (version %s)", snapshot.version)
    return PipelineView(
        name=LEGACY_PIPELINE_NAME,
        events_in=as_int(snapshot.get("pipeline.events.in")),
        events_out=as_int(snapshot.get("pipeline.events.out")),
        reload_failures=as_int(snapshot.get("pipeline.reloads.failures")),
        last_reload_error_message=_as_text(snapshot.get("pipeline.reloads.last_error.message")),
        last_reload_success_at=_as_timestamp(
            snapshot, "pipeline.reloads.last_success_timestamp"
        ),
        last_reload_failure_at=_as_timestamp(
            snapshot, "pipeline.reloads.last_failure_timestamp"
        ),
        legacy=True,
    )


def _as_text(value: Value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_timestamp(snapshot: Snapshot, path: str) -> datetime | None:
    """Parse ISO timestamps with either '+00:00' or trailing 'Z'; naive means UTC."""
    value = snapshot.get(path)
    if value is None:
        return None
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise InvalidField(path) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
