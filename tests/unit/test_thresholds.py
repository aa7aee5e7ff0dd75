"""Unit tests for check_logstash.health.thresholds."""

from __future__ import annotations

import pytest

from check_logstash.health import Severity
from check_logstash.health.thresholds import Range, above, outside


class TestRangeParse:
    def test_single_value_is_max(self):
        assert Range.parse("10") == Range(max=10)

    def test_trailing_colon_is_min(self):
        assert Range.parse("10:") == Range(min=10)

    def test_min_and_max(self):
        assert Range.parse("5:20") == Range(min=5, max=20)

    def test_negative_bounds(self):
        assert Range.parse("-5:5") == Range(min=-5, max=5)

    @pytest.mark.parametrize("text", ["", ":10", "1:2:3", "abc", "1:x"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            Range.parse(text)

    @pytest.mark.parametrize(
        "rng, rendered",
        [
            (Range(min=5, max=20), "5:20"),
            (Range(min=5), "5:"),
            (Range(max=20), "20"),
            (Range(), ""),
        ],
    )
    def test_perfdata_rendering(self, rng, rendered):
        assert str(rng) == rendered


class TestAbove:
    def test_ok_below_warning(self):
        assert above(50, 85, 95) == Severity.OK

    def test_warning(self):
        assert above(90, 85, 95) == Severity.WARNING

    def test_critical(self):
        assert above(96, 85, 95) == Severity.CRITICAL

    def test_equal_to_bound_does_not_trigger(self):
        assert above(85, 85, 95) == Severity.OK
        assert above(95, 85, 95) == Severity.WARNING

    def test_unset_bounds_disable_levels(self):
        assert above(100, None, None) == Severity.OK
        assert above(100, 85, None) == Severity.WARNING
        assert above(100, None, 95) == Severity.CRITICAL

    def test_monotonic_in_value(self):
        severities = [above(v, 85, 95) for v in range(0, 101)]
        assert severities == sorted(severities)


class TestOutside:
    def test_inside_every_range(self):
        assert outside(10, Range(min=5, max=20), Range(min=0, max=50)) == Severity.OK

    def test_critical_max(self):
        assert outside(51, Range(max=20), Range(max=50)) == Severity.CRITICAL

    def test_critical_min(self):
        assert outside(-1, Range(min=5), Range(min=0)) == Severity.CRITICAL

    def test_warning_max(self):
        assert outside(21, Range(max=20), Range(max=50)) == Severity.WARNING

    def test_warning_min(self):
        assert outside(3, Range(min=5), Range(min=0)) == Severity.WARNING

    def test_value_on_critical_max_is_not_critical(self):
        assert outside(50, Range(max=20), Range(max=50)) == Severity.WARNING
        assert outside(50, None, Range(max=50)) == Severity.OK

    def test_value_on_min_is_not_triggered(self):
        assert outside(5, Range(min=5), Range(min=5)) == Severity.OK

    def test_no_thresholds(self):
        assert outside(10**9, None, None) == Severity.OK

    def test_monotonic_above_upper_bounds(self):
        warning, critical = Range(max=20), Range(max=50)
        severities = [outside(v, warning, critical) for v in range(0, 100)]
        assert severities == sorted(severities)
