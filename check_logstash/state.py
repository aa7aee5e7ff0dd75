"""
check_logstash/state.py — Persisted event counters between check runs.

The events-per-minute rules need the counters of the previous run. They are
kept in a small JSON file per monitored endpoint:

    {"main": {"events_in": 1200, "events_out": 1180, "timestamp": 1718000000.5}}

The file is replaced wholesale at the end of every run that checks a rate.
Pipelines that disappeared are dropped; nothing is merged. Two runs against
the same endpoint sharing a temp dir race, and the last writer wins.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from typing import TYPE_CHECKING

import orjson
from pydantic import BaseModel, TypeAdapter, ValidationError

from check_logstash.errors import StateIOFailure

if TYPE_CHECKING:
    from check_logstash.pipelines import PipelineView

logger = logging.getLogger(__name__)


class PipelineCounters(BaseModel):
    events_in: int
    events_out: int
    timestamp: float


StateRecord = dict[str, PipelineCounters]

_RECORD_ADAPTER = TypeAdapter(StateRecord)


def state_path(temp_dir: str, host: str, port: int, pipeline: str | None) -> str:
    """One file per host, port and pipeline filter ("all" when unfiltered)."""
    name = f"check_logstash_{host}_{port}_{pipeline or 'all'}_events_state.tmp"
    return os.path.join(temp_dir, name)


def load_state(path: str) -> StateRecord:
    """Read the previous run's counters. A missing file means no prior data."""
    if not os.path.isfile(path):
        logger.debug("no state file at %s", path)
        return {}
    try:
        with open(path, "rb") as fh:
            raw = fh.read()
        return _RECORD_ADAPTER.validate_python(orjson.loads(raw))
    except (OSError, orjson.JSONDecodeError, ValidationError) as exc:
        raise StateIOFailure(f"Can not load state from temp file, reason: {exc}") from exc


def save_state(path: str, record: StateRecord) -> None:
    try:
        with open(path, "wb") as fh:
            fh.write(orjson.dumps(_RECORD_ADAPTER.dump_python(record)))
    except OSError as exc:
        raise StateIOFailure(f"Can not save state to temp file, reason: {exc}") from exc
    logger.debug("saved counters for %d pipeline(s) to %s", len(record), path)


def record_from_views(views: Iterable[PipelineView], captured_at: float) -> StateRecord:
    return {
        view.name: PipelineCounters(
            events_in=view.events_in,
            events_out=view.events_out,
            timestamp=captured_at,
        )
        for view in views
    }
