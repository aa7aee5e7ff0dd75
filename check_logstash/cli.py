"""
check_logstash/cli.py — Command-line entry point.

Exit codes follow the plugin convention: 0 OK, 1 WARNING, 2 CRITICAL,
3 UNKNOWN (bad arguments, unreachable API, unreadable state, ...).

Usage:
    check_logstash -H 10.0.0.5 --inflight-events-warn 100 --inflight-events-crit 500
    check_logstash -P beats --events-in-per-minute-crit 1:      # alert when idle
"""

from __future__ import annotations

import argparse
import logging
import sys

from check_logstash import __version__
from check_logstash.check import render, run_check
from check_logstash.errors import CheckError
from check_logstash.settings import load_settings

logger = logging.getLogger(__name__)

UNKNOWN = 3


class _PluginArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(UNKNOWN, f"{self.prog}: error: {message}\n")


# (flag, Settings field, help)
_PERCENT_OPTIONS = [
    ("--file-descriptor-threshold-warn", "FILE_DESCRIPTOR_WARN",
     "percentage of the process file descriptor limit for a warning (default 85)"),
    ("--file-descriptor-threshold-crit", "FILE_DESCRIPTOR_CRIT",
     "percentage of the process file descriptor limit for a critical (default 95)"),
    ("--heap-usage-threshold-warn", "HEAP_WARN", "heap usage percentage for a warning (default 70)"),
    ("--heap-usage-threshold-crit", "HEAP_CRIT", "heap usage percentage for a critical (default 80)"),
    ("--cpu-usage-threshold-warn", "CPU_WARN", "CPU usage percentage for a warning"),
    ("--cpu-usage-threshold-crit", "CPU_CRIT", "CPU usage percentage for a critical"),
]

_RANGE_OPTIONS = [
    ("--inflight-events-warn", "INFLIGHT_EVENTS_WARN", "inflight events for a warning"),
    ("--inflight-events-crit", "INFLIGHT_EVENTS_CRIT", "inflight events for a critical"),
    ("--events-in-per-minute-warn", "EVENTS_IN_PER_MINUTE_WARN", "incoming events per minute for a warning"),
    ("--events-in-per-minute-crit", "EVENTS_IN_PER_MINUTE_CRIT", "incoming events per minute for a critical"),
    ("--events-out-per-minute-warn", "EVENTS_OUT_PER_MINUTE_WARN", "outgoing events per minute for a warning"),
    ("--events-out-per-minute-crit", "EVENTS_OUT_PER_MINUTE_CRIT", "outgoing events per minute for a critical"),
]


def build_parser() -> argparse.ArgumentParser:
    parser = _PluginArgumentParser(
        prog="check_logstash",
        description="Icinga/Nagios check plugin for the Logstash node stats API. "
        "Every option can also be set as a CHECK_LOGSTASH_<FIELD> environment variable.",
    )
    conn = parser.add_argument_group("connection")
    conn.add_argument("-H", "--hostname", dest="HOSTNAME", help="Logstash host (default 127.0.0.1)")
    conn.add_argument("-p", "--port", dest="PORT", type=int, help="Logstash API port (default 9600)")
    conn.add_argument("-P", "--pipeline", dest="PIPELINE",
                      help="pipeline to monitor, uses all pipelines when not set")
    conn.add_argument("-s", "--secure", dest="SECURE", action="store_true", default=None,
                      help="use a HTTPS connection")
    conn.add_argument("-i", "--insecure", dest="INSECURE", action="store_true", default=None,
                      help="skip verification of the server's TLS certificate")
    conn.add_argument("-b", "--bearer", dest="BEARER", help="bearer token for server authentication")
    conn.add_argument("-u", "--user", dest="BASIC_AUTH",
                      help="user name and password for server authentication <user:password>")
    conn.add_argument("--ca-file", dest="CA_FILE", help="CA file for TLS verification")
    conn.add_argument("--cert-file", dest="CERT_FILE",
                      help="client certificate file for TLS authentication")
    conn.add_argument("--key-file", dest="KEY_FILE", help="client key file for TLS authentication")
    conn.add_argument("-t", "--timeout", dest="TIMEOUT_SECONDS", type=int,
                      help="HTTP timeout in seconds (default 30)")
    conn.add_argument("--env-file", help="read CHECK_LOGSTASH_* settings from this file")

    thresholds = parser.add_argument_group(
        "thresholds", "Range thresholds take MAX, MIN: or MIN:MAX."
    )
    for flag, field, help_text in _PERCENT_OPTIONS:
        thresholds.add_argument(flag, dest=field, type=int, metavar="PERCENT", help=help_text)
    for flag, field, help_text in _RANGE_OPTIONS:
        thresholds.add_argument(flag, dest=field, metavar="RANGE", help=help_text)
    thresholds.add_argument(
        "--temp-filedir",
        dest="TEMP_FILEDIR",
        help="directory for the events state file, only used by the "
        "events-per-minute thresholds (default /tmp/)",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    overrides = {k: v for k, v in vars(args).items() if k.isupper()}
    try:
        cfg = load_settings(overrides, env_file=args.env_file)
        outcome = run_check(cfg)
    except CheckError as exc:
        print(f"UNKNOWN - {exc}")
        return UNKNOWN
    except Exception as exc:  # noqa: BLE001
        logger.exception("unexpected failure")
        print(f"UNKNOWN - {type(exc).__name__}: {exc}")
        return UNKNOWN

    print(render(outcome))
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
