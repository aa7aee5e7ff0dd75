"""Unit tests for check_logstash.rates."""

import pytest

from check_logstash.rates import events_per_minute


def test_sixty_events_over_sixty_seconds():
    assert events_per_minute(100, 0, 160, 60) == 60


def test_fractional_rate_truncates():
    # 10 events in 7 s → 85.71/min
    assert events_per_minute(0, 0.0, 10, 7.0) == 85


def test_negative_rate_truncates_toward_zero():
    # counter reset: -10 events in 7 s → -85.71/min
    assert events_per_minute(10, 0.0, 0, 7.0) == -85


def test_no_change():
    assert events_per_minute(500, 1000.0, 500, 1300.0) == 0


def test_same_capture_time_rejected():
    with pytest.raises(ValueError):
        events_per_minute(1, 5.0, 2, 5.0)
