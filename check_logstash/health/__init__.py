"""
check_logstash/health — Health rules and their shared result types.

Each rule function returns one HealthResult. check.py runs them in a fixed
order and renders the report.

Usage:
    from check_logstash.health import HealthResult, Severity
    from check_logstash.health.process import heap_health
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum


class Severity(IntEnum):
    OK = 0
    WARNING = 1
    CRITICAL = 2

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class HealthResult:
    severity: Severity
    message: str

    def __str__(self) -> str:
        return f"{self.severity.label}: {self.message}"


def worst(severities: Iterable[Severity]) -> Severity:
    """Highest severity of the lot; OK for an empty iterable."""
    return max(severities, default=Severity.OK)


def summarize(results: list[HealthResult]) -> str:
    """Status text naming the first CRITICAL result, else the first WARNING."""
    for severity, headline in (
        (Severity.CRITICAL, "CRITICAL - Logstash is unhealthy"),
        (Severity.WARNING, "WARNING - Logstash may not be healthy"),
    ):
        first = next((r for r in results if r.severity == severity), None)
        if first is not None:
            return f"{headline} - {first}"
    return "OK - Logstash seems to be doing fine."
