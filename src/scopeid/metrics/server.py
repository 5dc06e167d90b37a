"""HTTP endpoint exposing the scopeid counters to Prometheus."""

from __future__ import annotations

import logging

from prometheus_client import start_http_server

logger = logging.getLogger(__name__)


def start_metrics_server(port: int, addr: str = "127.0.0.1") -> None:
    """Serve /metrics on *addr*:*port* from a background daemon thread.

    Binds to loopback by default; pass ``addr="0.0.0.0"`` to expose it.
    """
    start_http_server(port, addr=addr)
    logger.info("Serving scopeid metrics on %s:%d", addr, port)
