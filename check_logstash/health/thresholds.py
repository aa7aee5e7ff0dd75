"""
check_logstash/health/thresholds.py — Threshold comparison.

Two modes:
  above()    single upper bounds for percentages (file descriptors, heap, CPU)
  outside()  min/max ranges for counts and rates (inflight, events/minute)

An unset bound disables that level. All comparisons are strict, so a value
sitting exactly on a bound never triggers it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from check_logstash.health import Severity


class Range(BaseModel):
    """Allowed interval for a metric; values outside it trigger the level."""

    model_config = ConfigDict(frozen=True)

    min: int | None = None
    max: int | None = None

    @classmethod
    def parse(cls, text: str) -> Range:
        """Parse ``N`` (max only), ``N:`` (min only) or ``N:M``."""
        raw = text.strip()
        parts = raw.split(":")
        if not raw or raw.startswith(":") or len(parts) > 2:
            raise ValueError(f"invalid range '{text}'; use MAX, MIN: or MIN:MAX")
        try:
            if len(parts) == 1:
                return cls(max=int(parts[0]))
            if not parts[1]:
                return cls(min=int(parts[0]))
            return cls(min=int(parts[0]), max=int(parts[1]))
        except ValueError as exc:
            raise ValueError(f"invalid range '{text}': bounds must be integers") from exc

    def __str__(self) -> str:
        # Perfdata form: "MIN:MAX", "MIN:" or "MAX"
        low = f"{self.min}:" if self.min is not None else ""
        high = str(self.max) if self.max is not None else ""
        return low + high


def above(value: float, warning: float | None, critical: float | None) -> Severity:
    if critical is not None and value > critical:
        return Severity.CRITICAL
    if warning is not None and value > warning:
        return Severity.WARNING
    return Severity.OK


def outside(value: float, warning: Range | None, critical: Range | None) -> Severity:
    """First match wins: critical max, critical min, warning max, warning min."""
    for bounds, severity in ((critical, Severity.CRITICAL), (warning, Severity.WARNING)):
        if bounds is None:
            continue
        if bounds.max is not None and value > bounds.max:
            return severity
        if bounds.min is not None and value < bounds.min:
            return severity
    return Severity.OK
