# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Contract bundle data structures."""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Final, List, Mapping, Optional, Pattern, Tuple

from ..exceptions import ConfigurationError
from ..negotiation import parse_media_type
from ..telemetry.metrics import contract_route_count
from ..validation import ConstraintEvaluator, JsonSchemaValidator, ValidationContext, ValidationResult

logger = logging.getLogger(__name__)

_EVALUATOR: Final[ConstraintEvaluator] = ConstraintEvaluator()
_TEMPLATE_RE = re.compile(r"\{([^{}/]+)\}")

# Operations currently counted per bundle source; a reload reports only the delta.
_ROUTE_COUNTS: Dict[str, int] = {}
_ROUTE_COUNTS_LOCK = threading.Lock()


@dataclass(frozen=True)
class NamedParameter:
    """A declared query parameter and its constraint rules."""

    key: str
    required: bool = False
    rules: Mapping[str, Any] = field(default_factory=dict)

    def validate(self, value: str) -> ValidationResult:
        return _EVALUATOR.evaluate(
            self.rules,
            value_present=True,
            value=value,
            context=ValidationContext(argument=self.key),
        )


@dataclass(frozen=True)
class ResponseSchema:
    status: str
    types: Tuple[str, ...] = ()


@dataclass
class BodySchema:
    """JSON schema declared for one request content type."""

    content_type: str
    schema: Mapping[str, Any]
    _validator: Optional[JsonSchemaValidator] = field(default=None, repr=False, compare=False)

    def get_validator(self) -> JsonSchemaValidator:
        if self._validator is None:
            self._validator = JsonSchemaValidator(self.schema)
        return self._validator


@dataclass
class Operation:
    method: str
    parameters: List[NamedParameter] = field(default_factory=list)
    bodies: Dict[str, BodySchema] = field(default_factory=dict)
    responses: List[ResponseSchema] = field(default_factory=list)


@dataclass
class Route:
    path: str
    operations: Dict[str, Operation] = field(default_factory=dict)
    pattern: Optional[Pattern[str]] = field(default=None, repr=False)

    @property
    def is_template(self) -> bool:
        return self.pattern is not None

    def matches(self, path: str) -> bool:
        if self.pattern is None:
            return normalize_path(path) == self.path
        return self.pattern.fullmatch(normalize_path(path)) is not None


@dataclass
class ContractBundle:
    """A structured representation of a contract bundle.

    ``raw_bundle`` is a plain mapping, typically the result of loading a YAML
    or JSON file. Parsing validates every rule up front so that a broken
    contract fails at load time rather than on the first request.
    """

    raw_bundle: Dict[str, Any]
    source: str = "memory"
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    default_media_types: List[str] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if not isinstance(self.raw_bundle, Mapping):
            raise ConfigurationError("Contract bundle must be a mapping")

        defaults = self.raw_bundle.get("default_media_types") or []
        if isinstance(defaults, str):
            defaults = [defaults]
        if not isinstance(defaults, list):
            raise ConfigurationError("'default_media_types' must be a list of media types")
        self.default_media_types = [str(t) for t in defaults]

        raw_routes = self.raw_bundle.get("routes") or {}
        if not isinstance(raw_routes, Mapping):
            raise ConfigurationError("'routes' must map paths to operations")

        logger.debug("Processing %d routes from %s", len(raw_routes), self.source)

        for path, methods in raw_routes.items():
            self.routes.append(self._parse_route(str(path), methods))

        operation_count = sum(len(route.operations) for route in self.routes)
        _track_route_count(self.source, operation_count)
        logger.debug("Loaded %d operations across %d routes", operation_count, len(self.routes))

    def _parse_route(self, path: str, methods: Any) -> Route:
        if not isinstance(methods, Mapping):
            raise ConfigurationError(f"Route '{path}' must map HTTP methods to operations")

        normalized = normalize_path(path)
        route = Route(path=normalized, pattern=compile_template(normalized))
        for method, definition in methods.items():
            key = str(method).lower()
            if key in route.operations:
                raise ConfigurationError(f"Duplicate method '{method}' for route '{path}'")
            route.operations[key] = self._parse_operation(path, key, definition or {})
        return route

    def _parse_operation(self, path: str, method: str, definition: Any) -> Operation:
        where = f"{method.upper()} {path}"
        if not isinstance(definition, Mapping):
            raise ConfigurationError(f"Operation '{where}' must be a mapping")

        operation = Operation(method=method)

        query = definition.get("query") or {}
        if not isinstance(query, Mapping):
            raise ConfigurationError(f"'query' of '{where}' must map parameter names to rules")
        for name, rules in query.items():
            rules = rules or {}
            if not isinstance(rules, Mapping):
                raise ConfigurationError(f"Rules for parameter '{name}' of '{where}' must be a mapping")
            _EVALUATOR.check_rules(str(name), rules)
            operation.parameters.append(
                NamedParameter(key=str(name), required=bool(rules.get("required", False)), rules=dict(rules))
            )

        bodies = definition.get("body") or {}
        if not isinstance(bodies, Mapping):
            raise ConfigurationError(f"'body' of '{where}' must map content types to JSON schemas")
        for content_type, schema in bodies.items():
            if not isinstance(schema, (Mapping, bool)):
                raise ConfigurationError(f"Body schema for '{content_type}' of '{where}' must be a JSON schema")
            media_type, _ = parse_media_type(str(content_type))
            body = BodySchema(content_type=media_type, schema=schema)
            try:
                body.get_validator()
            except ConfigurationError as exc:
                logger.error("Invalid body schema for %s (%s): %s", where, media_type, exc)
                raise ConfigurationError(f"Invalid body schema for '{where}' ({media_type}): {exc.message}") from exc
            operation.bodies[media_type] = body

        responses = definition.get("responses") or {}
        if not isinstance(responses, Mapping):
            raise ConfigurationError(f"'responses' of '{where}' must map status codes to media types")
        for status, types in responses.items():
            if types is None:
                types = []
            elif isinstance(types, str):
                types = [types]
            elif not isinstance(types, list):
                raise ConfigurationError(f"Response '{status}' of '{where}' must list media types")
            operation.responses.append(ResponseSchema(status=str(status), types=tuple(str(t) for t in types)))

        return operation

    def find_route(self, path: str) -> Optional[Route]:
        """Literal routes win over templates; otherwise declaration order."""

        templated = None
        for route in self.routes:
            if not route.matches(path):
                continue
            if not route.is_template:
                return route
            if templated is None:
                templated = route
        return templated

    @property
    def operations(self) -> List[Tuple[str, str]]:
        return [(method.upper(), route.path) for route in self.routes for method in route.operations]

    @property
    def name(self) -> str:
        metadata = self.raw_bundle.get("metadata") or {}
        return str(metadata.get("name", "unnamed")) if isinstance(metadata, Mapping) else "unnamed"


def _track_route_count(source: str, operation_count: int) -> None:
    with _ROUTE_COUNTS_LOCK:
        delta = operation_count - _ROUTE_COUNTS.get(source, 0)
        _ROUTE_COUNTS[source] = operation_count
    if delta:
        contract_route_count.add(delta, {"source": source})


def normalize_path(path: str) -> str:
    path = path or "/"
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def compile_template(path: str) -> Optional[Pattern[str]]:
    if not _TEMPLATE_RE.search(path):
        return None
    parts = []
    position = 0
    for match in _TEMPLATE_RE.finditer(path):
        parts.append(re.escape(path[position:match.start()]))
        parts.append(f"(?P<{_group_name(match.group(1), len(parts))}>[^/]+)")
        position = match.end()
    parts.append(re.escape(path[position:]))
    return re.compile("".join(parts))


def _group_name(name: str, index: int) -> str:
    cleaned = re.sub(r"\W", "_", name)
    if not cleaned or cleaned[0].isdigit():
        cleaned = f"p_{cleaned}"
    return f"{cleaned}_{index}"


__all__ = [
    "BodySchema",
    "ContractBundle",
    "NamedParameter",
    "Operation",
    "ResponseSchema",
    "Route",
    "compile_template",
    "normalize_path",
]
