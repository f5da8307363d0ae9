"""Shared pytest fixtures for the reqcheck test-suite."""

from __future__ import annotations

import copy
from typing import Any, Dict

import pytest

from reqcheck import BundleSchemaStore, ContractBundle, RequestValidator

USERS_CONTRACT: Dict[str, Any] = {
    "metadata": {"name": "users-api"},
    "routes": {
        "/users": {
            "get": {
                "query": {
                    "a": {"required": True},
                    "b": {"required": True},
                    "id": {"type": "integer"},
                    "sort": {"enum": ["asc", "desc"]},
                },
                "responses": {200: ["application/json", "application/xml"]},
            },
            "post": {
                "body": {
                    "application/json": {
                        "type": "object",
                        "properties": {"x": {"type": "string"}, "y": {"type": "integer"}},
                        "required": ["x"],
                    }
                },
                "responses": {201: ["application/json"]},
            },
        },
        "/users/{id}": {
            "get": {"responses": {200: ["application/json"]}},
            "delete": {},
        },
        "/health": {
            "get": {},
            "post": {"body": {"application/json": {"type": "object"}}},
        },
    },
}


@pytest.fixture()
def users_contract() -> Dict[str, Any]:
    """Return a fresh copy of the users contract so tests may tweak it."""
    return copy.deepcopy(USERS_CONTRACT)


@pytest.fixture()
def users_bundle(users_contract) -> ContractBundle:
    return ContractBundle(raw_bundle=users_contract)


@pytest.fixture()
def users_store(users_bundle) -> BundleSchemaStore:
    return BundleSchemaStore(users_bundle)


@pytest.fixture()
def validator(users_store, monkeypatch) -> RequestValidator:
    monkeypatch.delenv("REQCHECK_STRICT_CONTENT_TYPE", raising=False)
    return RequestValidator(users_store)


@pytest.fixture()
def make_validator(monkeypatch):
    """Build a validator from a raw bundle mapping."""

    monkeypatch.delenv("REQCHECK_STRICT_CONTENT_TYPE", raising=False)

    def _make(raw: Dict[str, Any], **kwargs: Any) -> RequestValidator:
        return RequestValidator(BundleSchemaStore(ContractBundle(raw_bundle=raw)), **kwargs)

    return _make


@pytest.fixture(autouse=True)
def _silence_logging(caplog):  # noqa: D401
    """Reduce noise – most tests assert behaviour, not log output."""
    caplog.set_level("WARNING")
    yield


@pytest.fixture()
def anyio_backend():  # noqa: D401
    """Force *anyio* tests to use the standard asyncio backend only."""
    return "asyncio"
