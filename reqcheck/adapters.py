# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""httpx integration for contract tests.

Attach a hook to a client and every outgoing request is validated against
the contract before it is sent::

    client = httpx.Client(
        base_url="http://localhost:8000",
        event_hooks={"request": [validation_hook(validator)]},
    )

A non-conforming request raises its ``ValidationFailure`` from the send call.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .request import HttpRequest
from .validator import RequestValidator

logger = logging.getLogger(__name__)


def from_httpx(request: httpx.Request, body: Optional[bytes] = None) -> HttpRequest:
    """Convert an ``httpx.Request`` into the validator's request type."""

    if body is None:
        body = request.read()
    return HttpRequest(
        request.method,
        request.url.path,
        headers=request.headers.multi_items(),
        query=request.url.query.decode("ascii", errors="replace"),
        body=body,
    )


def validation_hook(validator: RequestValidator):
    """Return an httpx ``request`` event hook for synchronous clients."""

    def _hook(request: httpx.Request) -> None:
        logger.debug("Validating outgoing %s %s", request.method, request.url)
        validator.validate_request(from_httpx(request))

    return _hook


def async_validation_hook(validator: RequestValidator):
    """Return an httpx ``request`` event hook for ``httpx.AsyncClient``."""

    async def _hook(request: httpx.Request) -> None:
        logger.debug("Validating outgoing %s %s", request.method, request.url)
        body = await request.aread()
        await validator.validate_request_async(from_httpx(request, body=body))

    return _hook


__all__ = ["async_validation_hook", "from_httpx", "validation_hook"]
