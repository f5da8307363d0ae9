# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""OpenTelemetry handles shared by the reqcheck instruments.

Only the OpenTelemetry *API* is used. Applications that install and configure
an SDK get real metrics and spans; otherwise every call is a no-op.
"""

from __future__ import annotations

from opentelemetry import metrics, trace

from .._version import __version__

meter = metrics.get_meter("reqcheck", __version__)


def get_tracer(name: str = "reqcheck"):
    """Return a tracer from the globally configured tracer provider."""

    return trace.get_tracer(name, __version__)


__all__ = ["get_tracer", "meter"]
