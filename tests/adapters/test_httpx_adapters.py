# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""httpx conversion and event-hook integration."""

import httpx
import pytest

from reqcheck import BodySchemaFailure, MediaTypeFailure, MissingParameterFailure
from reqcheck.adapters import async_validation_hook, from_httpx, validation_hook


def _ok_transport():
    return httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": True}))


def test_from_httpx_copies_request_parts():
    request = httpx.Request(
        "POST",
        "http://api.test/users?a=1&b=two",
        headers={"Accept": "application/json"},
        json={"x": "y"},
    )

    converted = from_httpx(request)

    assert converted.get_method() == "POST"
    assert converted.get_path() == "/users"
    assert converted.get_raw_query_string() == "a=1&b=two"
    assert converted.get_header_value("accept") == "application/json"
    assert converted.get_header_value("content-type") == "application/json"
    assert converted.get_body_bytes() == request.content


def test_sync_hook_lets_conforming_requests_through(validator):
    with httpx.Client(
        base_url="http://api.test",
        transport=_ok_transport(),
        event_hooks={"request": [validation_hook(validator)]},
    ) as client:
        response = client.get("/users", params={"a": "1", "b": "2"}, headers={"Accept": "application/json"})

    assert response.status_code == 200


def test_sync_hook_raises_validation_failure(validator):
    with httpx.Client(
        base_url="http://api.test",
        transport=_ok_transport(),
        event_hooks={"request": [validation_hook(validator)]},
    ) as client:
        with pytest.raises(MissingParameterFailure):
            client.get("/users", params={"a": "1"}, headers={"Accept": "application/json"})

        with pytest.raises(BodySchemaFailure):
            client.post("/users", json={"x": 1}, headers={"Accept": "application/json"})


@pytest.mark.anyio
async def test_async_hook_validates_requests(validator):
    async with httpx.AsyncClient(
        base_url="http://api.test",
        transport=_ok_transport(),
        event_hooks={"request": [async_validation_hook(validator)]},
    ) as client:
        response = await client.post("/users", json={"x": "fine"}, headers={"Accept": "application/json"})
        assert response.status_code == 200

        with pytest.raises(MediaTypeFailure):
            await client.get("/users", params={"a": "1", "b": "2"}, headers={"Accept": "text/html"})
