# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric instrument definitions for reqcheck."""

from __future__ import annotations

import logging
import time
from typing import Optional

from .runtime import meter

logger = logging.getLogger(__name__)

request_validation_total = meter.create_counter(
    name="reqcheck.request.validation.total",
    description="Counts validated requests partitioned by outcome and failure kind.",
    unit="1",
)

request_validation_latency_ms = meter.create_histogram(
    name="reqcheck.request.validation.latency.ms",
    description="Time spent running the validation pipeline for one request.",
    unit="ms",
)

contract_route_count = meter.create_up_down_counter(
    name="reqcheck.contract.route_count",
    description="Number of (method, path) operations declared by the latest bundle loaded from each source.",
    unit="1",
)


def record_validation_metrics(status: str, kind: Optional[str], started_at: float) -> None:
    """Record the counter and latency for one pipeline run.

    Args:
        status: ``"passed"`` or ``"failed"``
        kind: Failure kind value, ``None`` on success
        started_at: Timestamp from ``time.perf_counter()`` when the run started
    """

    duration_ms = (time.perf_counter() - started_at) * 1000.0
    attributes = {"status": status, "kind": kind or "none"}
    try:
        request_validation_latency_ms.record(duration_ms, attributes)
        request_validation_total.add(1, attributes)
    except Exception:  # pragma: no cover - exporter failures must not break validation
        logger.debug("Failed to record validation metrics", exc_info=True)


__all__ = [
    "contract_route_count",
    "record_validation_metrics",
    "request_validation_latency_ms",
    "request_validation_total",
]
