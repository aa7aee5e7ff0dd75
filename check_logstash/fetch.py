"""
check_logstash/fetch.py — Node stats retrieval.

Uses the Logstash monitoring API (GET /_node/stats) via urllib. One request
per run; the only timeout is the socket timeout from TIMEOUT_SECONDS.
"""

from __future__ import annotations

import base64
import json
import logging
import ssl
import time
import urllib.error
import urllib.request
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from check_logstash.errors import FetchFailure
from check_logstash.snapshot import Snapshot

if TYPE_CHECKING:
    from check_logstash.settings import Settings

logger = logging.getLogger(__name__)

STATS_PATH = "/_node/stats"


def fetch(cfg: Settings, clock: Callable[[], float] = time.time) -> Snapshot:
    url = f"{cfg.base_url}{STATS_PATH}"
    request = urllib.request.Request(url, headers=_headers(cfg))
    context = _ssl_context(cfg)
    logger.debug("GET %s", url)
    try:
        with urllib.request.urlopen(
            request, timeout=cfg.TIMEOUT_SECONDS, context=context
        ) as resp:
            status = resp.status
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise FetchFailure(f"Got HTTP response {e.code}") from e
    except (urllib.error.URLError, OSError) as e:
        raise FetchFailure(f"Can not connect to Logstash at {url}: {e}") from e

    if status != 200:
        raise FetchFailure(f"Got HTTP response {status}")

    try:
        data = json.loads(body)
    except ValueError as e:
        raise FetchFailure(f"Failed parsing JSON response. {type(e).__name__}") from e
    if not isinstance(data, dict):
        raise FetchFailure("Failed parsing JSON response. Expected a JSON object")

    if cfg.PIPELINE:
        data = _select_pipeline(data, cfg.PIPELINE)
    return Snapshot(data, captured_at=clock())


def _select_pipeline(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Narrow ``pipelines`` to the requested one; fail when nothing matches."""
    pipelines = data.get("pipelines")
    if not isinstance(pipelines, dict) or name not in pipelines:
        raise FetchFailure(f"Pipeline not found: {name}")
    return {**data, "pipelines": {name: pipelines[name]}}


def _headers(cfg: Settings) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if cfg.BEARER:
        headers["Authorization"] = f"Bearer {cfg.BEARER}"
    elif cfg.BASIC_AUTH:
        token = base64.b64encode(cfg.BASIC_AUTH.encode("utf-8")).decode("ascii")
        headers["Authorization"] = f"Basic {token}"
    return headers


def _ssl_context(cfg: Settings) -> ssl.SSLContext | None:
    if not cfg.SECURE:
        return None
    context = ssl.create_default_context(cafile=cfg.CA_FILE)
    if cfg.INSECURE:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    if cfg.CERT_FILE:
        # KEY_FILE may be unset when the key is bundled in the certificate PEM.
        try:
            context.load_cert_chain(cfg.CERT_FILE, cfg.KEY_FILE)
        except OSError as e:
            raise FetchFailure(f"Can not load client certificate {cfg.CERT_FILE}: {e}") from e
    return context
