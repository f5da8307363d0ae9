# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Contract schema store: resolves (method, path) to declared rules."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, runtime_checkable

from ..exceptions import ContractNotFoundError
from ..negotiation import parse_media_type
from .bundle import BodySchema, ContractBundle, NamedParameter, Operation, ResponseSchema

logger = logging.getLogger(__name__)


@runtime_checkable
class ContractSchemaStore(Protocol):
    """Lookups the request validator performs against a contract."""

    def get_query_parameters(self, method: str, path: str, required_only: bool = False) -> List[NamedParameter]: ...

    def get_request_body(self, method: str, path: str, content_type: str) -> Optional[BodySchema]: ...

    def get_responses(self, method: str, path: str) -> List[ResponseSchema]: ...

    def get_default_media_types(self) -> List[str]: ...


@runtime_checkable
class SupportsBodyTypes(Protocol):
    """Optional lookup used by strict content-type checking."""

    def get_request_body_types(self, method: str, path: str) -> List[str]: ...


class BundleSchemaStore:
    """``ContractSchemaStore`` backed by a parsed ``ContractBundle``.

    Method names are compared case-insensitively and content types without
    their parameters. Unknown routes raise ``ContractNotFoundError``. The store
    never mutates the bundle, so one instance can serve concurrent callers.
    """

    def __init__(self, bundle: ContractBundle):
        self.bundle = bundle

    def _operation(self, method: str, path: str) -> Operation:
        route = self.bundle.find_route(path)
        if route is None:
            raise ContractNotFoundError(method, path, "unknown path")
        operation = route.operations.get(method.lower())
        if operation is None:
            raise ContractNotFoundError(method, path, "method not declared for this path")
        return operation

    def get_query_parameters(self, method: str, path: str, required_only: bool = False) -> List[NamedParameter]:
        parameters = self._operation(method, path).parameters
        if required_only:
            return [p for p in parameters if p.required]
        return list(parameters)

    def get_request_body(self, method: str, path: str, content_type: str) -> Optional[BodySchema]:
        bodies = self._operation(method, path).bodies
        media_type, _ = parse_media_type(content_type or "")
        body = bodies.get(media_type)
        if body is None and bodies:
            logger.debug("No body schema for %s on %s %s", media_type or "<none>", method.upper(), path)
        return body

    def get_request_body_types(self, method: str, path: str) -> List[str]:
        return list(self._operation(method, path).bodies)

    def get_responses(self, method: str, path: str) -> List[ResponseSchema]:
        return list(self._operation(method, path).responses)

    def get_default_media_types(self) -> List[str]:
        return list(self.bundle.default_media_types)


__all__ = ["BundleSchemaStore", "ContractSchemaStore", "SupportsBodyTypes"]
