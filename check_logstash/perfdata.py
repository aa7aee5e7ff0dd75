"""
check_logstash/perfdata.py — Performance data for graphing.

Every metric renders as ``label=value[UOM];warn;crit;min;max``; anything
unset is left empty. UOM ``c`` marks a counter and ``%`` a percentage.
Range-thresholded metrics render their bounds as ``MIN:MAX``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from check_logstash.health.pipeline import pipeline_rate

if TYPE_CHECKING:
    from check_logstash.health.thresholds import Range
    from check_logstash.pipelines import PipelineView
    from check_logstash.settings import Settings
    from check_logstash.snapshot import Snapshot
    from check_logstash.state import StateRecord


def _blank(value: object) -> str:
    return "" if value is None else str(value)


def report(
    label: str,
    value: object,
    uom: str = "",
    warning: object = None,
    critical: object = None,
    minimum: object = None,
    maximum: object = None,
) -> str:
    bounds = ";".join(_blank(v) for v in (warning, critical, minimum, maximum))
    return f"{label}={_blank(value)}{uom};{bounds}"


def report_range(
    label: str, value: int, warning: Range | None, critical: Range | None
) -> str:
    return f"{label}={value};{_blank(warning)};{_blank(critical)}"


def performance_data(
    snapshot: Snapshot,
    views: list[PipelineView],
    state: StateRecord,
    cfg: Settings,
) -> str:
    max_fds = snapshot.get("process.max_file_descriptors")
    common = [
        report(
            "process.cpu.percent",
            snapshot.get("process.cpu.percent"),
            "%",
            cfg.CPU_WARN,
            cfg.CPU_CRIT,
            0,
            100,
        ),
        report(
            "jvm.mem.heap_used_percent",
            snapshot.get("jvm.mem.heap_used_percent"),
            "%",
            cfg.HEAP_WARN,
            cfg.HEAP_CRIT,
            0,
            100,
        ),
        report("jvm.threads.count", snapshot.get("jvm.threads.count"), minimum=0),
        report(
            "process.open_file_descriptors",
            snapshot.get("process.open_file_descriptors"),
            warning=_fd_bound(max_fds, cfg.FILE_DESCRIPTOR_WARN),
            critical=_fd_bound(max_fds, cfg.FILE_DESCRIPTOR_CRIT),
            minimum=0,
            maximum=max_fds,
        ),
    ]
    per_pipeline = []
    for view in views:
        per_pipeline.extend(_pipeline_perfdata(view, state, snapshot.captured_at, cfg))
    return " ".join(common + per_pipeline)


def _fd_bound(max_fds: object, percent: int | None) -> int | None:
    # Whole hundredths of the limit, times the percentage.
    if percent is None:
        return None
    return int(max_fds) // 100 * percent


def _pipeline_perfdata(
    view: PipelineView, state: StateRecord, captured_at: float, cfg: Settings
) -> list[str]:
    if view.legacy:
        suffix = ""
        counter_prefix = "pipeline"
    else:
        suffix = f"_{view.name}"
        counter_prefix = f"pipelines.{view.name}"

    lines = []
    if cfg.checks_events_in_per_minute:
        rate = pipeline_rate(view, state, captured_at, "in")
        if rate is not None:
            lines.append(
                report_range(
                    f"events_in_per_minute{suffix}",
                    rate,
                    cfg.EVENTS_IN_PER_MINUTE_WARN,
                    cfg.EVENTS_IN_PER_MINUTE_CRIT,
                )
            )
    if cfg.checks_events_out_per_minute:
        rate = pipeline_rate(view, state, captured_at, "out")
        if rate is not None:
            lines.append(
                report_range(
                    f"events_out_per_minute{suffix}",
                    rate,
                    cfg.EVENTS_OUT_PER_MINUTE_WARN,
                    cfg.EVENTS_OUT_PER_MINUTE_CRIT,
                )
            )
    lines.append(report(f"{counter_prefix}.events.in", view.events_in, "c", minimum=0))
    lines.append(report(f"{counter_prefix}.events.out", view.events_out, "c", minimum=0))
    # Perfdata has always graphed in - out, including for pre-6.0.0 nodes.
    lines.append(
        report_range(
            f"inflight_events{suffix}",
            view.events_in - view.events_out,
            cfg.INFLIGHT_EVENTS_WARN,
            cfg.INFLIGHT_EVENTS_CRIT,
        )
    )
    return lines
