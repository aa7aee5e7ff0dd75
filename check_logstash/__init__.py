"""
check_logstash — Icinga/Nagios check plugin for the Logstash node stats API.

Usage:
    check_logstash -H 127.0.0.1 -p 9600 --inflight-events-warn 100

Importable:
    from check_logstash.check import run_check
    outcome = run_check(cfg)
"""

__version__ = "0.9.0"
