"""Events-per-minute rate between two counter observations."""

from __future__ import annotations


def events_per_minute(
    prior_count: int,
    prior_timestamp: float,
    current_count: int,
    current_timestamp: float,
) -> int:
    """Return the per-minute rate, truncated toward zero.

    Counter resets (Logstash restarts) produce a negative rate; that is
    reported as-is so range thresholds with a minimum can flag it.
    """
    elapsed = current_timestamp - prior_timestamp
    if elapsed == 0:
        raise ValueError("cannot compute a rate from two captures taken at the same time")
    return int((current_count - prior_count) / elapsed * 60)
