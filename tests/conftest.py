"""
tests/conftest.py — Shared fixtures and path setup for all tests.

Adds the project root to sys.path so tests can import the package without
installing it:
    from check_logstash.settings import Settings
    from check_logstash.snapshot import Snapshot
    from check_logstash.health import HealthResult
"""
import copy
import pathlib
import sys

import pytest

# Make project root importable without installing as a package
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# ---------------------------------------------------------------------------
# Canned /_node/stats payloads
# ---------------------------------------------------------------------------

MODERN_STATS = {
    "host": "ls01",
    "version": "7.17.9",
    "status": "green",
    "jvm": {
        "threads": {"count": 64, "peak_count": 70},
        "mem": {
            "heap_used_percent": 25,
            "heap_used_in_bytes": 268435456,
            "heap_max_in_bytes": 1073741824,
        },
    },
    "process": {
        "open_file_descriptors": 120,
        "max_file_descriptors": 16384,
        "cpu": {"percent": 3},
    },
    "pipelines": {
        "main": {
            "events": {"in": 1000, "out": 990, "filtered": 990},
            "reloads": {
                "failures": 0,
                "successes": 2,
                "last_error": None,
                "last_success_timestamp": "2024-06-01T10:00:00.000Z",
                "last_failure_timestamp": None,
            },
        },
        "beats": {
            "events": {"in": 500, "out": 500, "filtered": 500},
            "reloads": {
                "failures": 0,
                "successes": 0,
                "last_error": None,
                "last_success_timestamp": None,
                "last_failure_timestamp": None,
            },
        },
        ".monitoring-logstash": {
            "events": {"in": 7, "out": 7},
            "reloads": {"failures": 0, "successes": 0, "last_error": None},
        },
    },
}

LEGACY_STATS = {
    "host": "ls-old",
    "version": "5.6.3",
    "jvm": {
        "threads": {"count": 40, "peak_count": 42},
        "mem": {
            "heap_used_percent": 30,
            "heap_used_in_bytes": 300,
            "heap_max_in_bytes": 1000,
        },
    },
    "process": {
        "open_file_descriptors": 80,
        "max_file_descriptors": 4096,
        "cpu": {"percent": 12},
    },
    "pipeline": {
        "events": {"in": 500, "out": 480, "filtered": 480},
        "reloads": {
            "failures": 0,
            "successes": 0,
            "last_error": None,
            "last_success_timestamp": None,
            "last_failure_timestamp": None,
        },
    },
}


@pytest.fixture
def modern_stats():
    return copy.deepcopy(MODERN_STATS)


@pytest.fixture
def legacy_stats():
    return copy.deepcopy(LEGACY_STATS)
