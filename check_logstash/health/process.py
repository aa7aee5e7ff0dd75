"""
check_logstash/health/process.py — Whole-process rules.

File descriptors, heap and CPU have one value per node, so they are
evaluated once regardless of how many pipelines are in scope.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from check_logstash.health import HealthResult
from check_logstash.health.thresholds import above
from check_logstash.snapshot import as_int

if TYPE_CHECKING:
    from check_logstash.settings import Settings
    from check_logstash.snapshot import Snapshot

FILE_DESCRIPTOR_REPORT = "Open file descriptors at %.2f%%. (%d out of %d file descriptors are open)"
HEAP_REPORT = "Heap usage at %.2f%% (%d out of %d bytes in use)"
CPU_REPORT = "CPU usage in percent: %d"


def file_descriptor_health(snapshot: Snapshot, cfg: Settings) -> HealthResult:
    max_fds = snapshot.get("process.max_file_descriptors")
    open_fds = snapshot.get("process.open_file_descriptors")
    # The stats API does not report the percentage directly. A zero limit
    # means any open descriptor is over it.
    percent = float(open_fds) / max_fds * 100.0 if max_fds else math.inf
    return HealthResult(
        above(percent, cfg.FILE_DESCRIPTOR_WARN, cfg.FILE_DESCRIPTOR_CRIT),
        FILE_DESCRIPTOR_REPORT % (percent, open_fds, max_fds),
    )


def heap_health(snapshot: Snapshot, cfg: Settings) -> HealthResult:
    percent = snapshot.get("jvm.mem.heap_used_percent")
    report = HEAP_REPORT % (
        percent,
        snapshot.get("jvm.mem.heap_used_in_bytes"),
        snapshot.get("jvm.mem.heap_max_in_bytes"),
    )
    return HealthResult(above(percent, cfg.HEAP_WARN, cfg.HEAP_CRIT), report)


def cpu_usage_health(snapshot: Snapshot, cfg: Settings) -> HealthResult:
    percent = as_int(snapshot.get("process.cpu.percent"))
    return HealthResult(above(percent, cfg.CPU_WARN, cfg.CPU_CRIT), CPU_REPORT % percent)
