# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Request validation pipeline.

``RequestValidator`` runs four checks against a request, in this order,
stopping at the first one that fails:

1. Media types: the Accept header must negotiate against the response media
   types the contract declares (or the contract defaults).
2. Missing parameters: every required query parameter must be present.
3. Parameter values: every present, declared query parameter must satisfy
   its constraints.
4. Body: for any method other than ``GET`` the body must be valid JSON that
   satisfies the schema declared for the request's content type.

Each check returns ``None`` or a ``ValidationFailure``. ``check`` wraps the
result in a ``ValidationOutcome``; ``validate_request`` raises the failure.
Contract lookup errors (``ContractNotFoundError``) are never converted into
validation failures.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

import anyio

from .contract import (
    BundleSchemaStore,
    ContractSchemaStore,
    SupportsBodyTypes,
    load_contract_file,
    locate_contract_file,
)
from .exceptions import (
    BodySchemaFailure,
    ContractNotFoundError,
    MalformedBodyFailure,
    MediaTypeFailure,
    MissingParameterFailure,
    ParameterValueFailure,
    UnsupportedContentTypeFailure,
    ValidationFailure,
)
from .negotiation import AcceptNegotiator, MediaTypeNegotiator
from .request import Request, parse_query
from .telemetry import get_tracer, record_validation_metrics
from .validation import SchemaError

logger = logging.getLogger(__name__)

STRICT_CONTENT_TYPE_ENV = "REQCHECK_STRICT_CONTENT_TYPE"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() not in ("", "0", "false", "no")


def is_read_only(method: str) -> bool:
    """Body validation is skipped for ``GET`` in any letter case."""

    return method.lower() == "get"


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of one pipeline run: success or exactly one failure."""

    failure: Optional[ValidationFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def kind(self) -> Optional[str]:
        return self.failure.kind.value if self.failure is not None else None

    def raise_for_failure(self) -> None:
        if self.failure is not None:
            raise self.failure

    def __bool__(self) -> bool:
        return self.ok


class RequestValidator:
    """Validate requests against a contract schema store.

    :param store: Contract lookups. Treated as read-only.
    :param negotiator: Accept header negotiator; defaults to ``AcceptNegotiator``.
    :param strict_content_type: Reject bodies whose content type has no declared
        schema on a route that declares at least one. Needs a store that also
        implements ``SupportsBodyTypes``. Defaults to the
        ``REQCHECK_STRICT_CONTENT_TYPE`` environment variable.
    """

    def __init__(
        self,
        store: ContractSchemaStore,
        negotiator: Optional[MediaTypeNegotiator] = None,
        *,
        strict_content_type: Optional[bool] = None,
    ):
        self._store = store
        self._negotiator = negotiator if negotiator is not None else AcceptNegotiator()
        if strict_content_type is None:
            strict_content_type = _env_flag(STRICT_CONTENT_TYPE_ENV)
        self.strict_content_type = strict_content_type

    @property
    def store(self) -> ContractSchemaStore:
        return self._store

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check(self, request: Request) -> ValidationOutcome:
        method = request.get_method()
        path = request.get_path()
        started_at = time.perf_counter()

        with get_tracer("reqcheck.validator").start_as_current_span(
            f"reqcheck.validate:{method.upper()} {path}",
            attributes={"http.request.method": method.upper(), "url.path": path},
        ) as span:
            try:
                failure = self._run_checks(request, method, path)
            except ContractNotFoundError:
                record_validation_metrics("error", None, started_at)
                raise

            span.set_attribute("reqcheck.valid", failure is None)
            if failure is not None:
                span.set_attribute("reqcheck.failure.kind", failure.kind.value)

        if failure is None:
            record_validation_metrics("passed", None, started_at)
            return ValidationOutcome()

        logger.debug(
            "Request %s %s failed %s check: %s", method.upper(), path, failure.kind.value, failure.message
        )
        record_validation_metrics("failed", failure.kind.value, started_at)
        return ValidationOutcome(failure=failure)

    def validate_request(self, request: Request) -> None:
        """Return normally if *request* conforms, else raise its ``ValidationFailure``."""

        self.check(request).raise_for_failure()

    async def check_async(self, request: Request) -> ValidationOutcome:
        return await anyio.to_thread.run_sync(self.check, request)

    async def validate_request_async(self, request: Request) -> None:
        """Run ``validate_request`` on a worker thread, for use inside event loops."""

        outcome = await self.check_async(request)
        outcome.raise_for_failure()

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run_checks(self, request: Request, method: str, path: str) -> Optional[ValidationFailure]:
        for step in (self._check_media_types, self._check_missing_parameters, self._check_parameter_values):
            failure = step(request, method, path)
            if failure is not None:
                return failure

        if is_read_only(method):
            return None
        return self._check_body(request, method, path)

    def _check_media_types(self, request: Request, method: str, path: str) -> Optional[ValidationFailure]:
        offered: List[str] = []
        for response in self._store.get_responses(method, path):
            for media_type in response.types:
                if media_type not in offered:
                    offered.append(media_type)

        if not offered:
            offered = list(self._store.get_default_media_types())
        if not offered:
            return None

        accept = request.get_header_value("Accept")
        where = f"`{method.upper()} {path}`"
        if not accept:
            return MediaTypeFailure(
                f"Invalid media type for {where}: no Accept header, expected one of: {', '.join(offered)}",
                method=method,
                path=path,
                offered=offered,
            )

        if self._negotiator.get_best(accept, offered) is None:
            return MediaTypeFailure(
                f"Invalid media type for {where}: Accept header '{accept}' matches none of: {', '.join(offered)}",
                method=method,
                path=path,
                accept=accept,
                offered=offered,
            )
        return None

    def _check_missing_parameters(self, request: Request, method: str, path: str) -> Optional[ValidationFailure]:
        required = self._store.get_query_parameters(method, path, required_only=True)
        present = parse_query(request.get_raw_query_string())

        missing = [parameter.key for parameter in required if parameter.key not in present]
        if not missing:
            return None

        return MissingParameterFailure(
            "Missing request parameters required by the schema for "
            f"`{method.upper()} {path}`: {', '.join(missing)}",
            method=method,
            path=path,
            missing=missing,
        )

    def _check_parameter_values(self, request: Request, method: str, path: str) -> Optional[ValidationFailure]:
        parameters = self._store.get_query_parameters(method, path)
        present = parse_query(request.get_raw_query_string())

        for parameter in parameters:
            if parameter.key not in present:
                continue

            result = parameter.validate(present[parameter.key])
            if result.allowed:
                continue

            return ParameterValueFailure(
                f"Request parameter does not match schema for `{method.upper()} {path}`: {result.message}",
                method=method,
                path=path,
                parameter=parameter.key,
                violations=result.violations,
            )
        return None

    def _check_body(self, request: Request, method: str, path: str) -> Optional[ValidationFailure]:
        content_type = request.get_header_value("Content-Type")
        body_schema = self._store.get_request_body(method, path, content_type)

        if body_schema is None:
            if self.strict_content_type and self._declared_body_types(method, path):
                error = SchemaError(
                    property="Content-Type",
                    constraint="declared",
                    message=f"No body schema declared for content type '{content_type}'",
                )
                return UnsupportedContentTypeFailure(
                    f"Request body for {method.upper()} {path} with content type {content_type or '<none>'} "
                    f"does not match schema: {error}",
                    method=method,
                    path=path,
                    content_type=content_type,
                    errors=[error],
                )
            return None

        raw = request.get_body_bytes()
        try:
            document: Any = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            return MalformedBodyFailure(
                f"Request body for {method.upper()} {path} is not valid JSON: {exc}",
                method=method,
                path=path,
                content_type=content_type,
                cause=exc,
            )

        errors = body_schema.get_validator().validate(document)
        if not errors:
            return None

        return BodySchemaFailure(
            f"Request body for {method.upper()} {path} with content type {content_type} "
            f"does not match schema: {', '.join(str(error) for error in errors)}",
            method=method,
            path=path,
            content_type=content_type,
            errors=errors,
        )

    def _declared_body_types(self, method: str, path: str) -> List[str]:
        if not isinstance(self._store, SupportsBodyTypes):
            return []
        return list(self._store.get_request_body_types(method, path))


def load_validator(contract_path: Optional[Union[str, Path]] = None, **kwargs: Any) -> RequestValidator:
    """Build a ``RequestValidator`` from the located contract file."""

    bundle = load_contract_file(locate_contract_file(contract_path))
    return RequestValidator(BundleSchemaStore(bundle), **kwargs)


__all__ = [
    "RequestValidator",
    "STRICT_CONTENT_TYPE_ENV",
    "ValidationOutcome",
    "is_read_only",
    "load_validator",
]
