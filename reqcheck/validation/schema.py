# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""JSON schema validation for request bodies.

Wraps a ``jsonschema`` validator class and reduces its errors to
``SchemaError(property, constraint)`` pairs, in the order ``jsonschema``
reports them. A document nested deeper than the interpreter can descend is
reported as a single ``$ (depth)`` error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Set, Tuple

import jsonschema
from jsonschema.exceptions import SchemaError as JsonSchemaDefinitionError
from jsonschema.validators import validator_for

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ROOT_PROPERTY = "$"


@dataclass(frozen=True)
class SchemaError:
    """One violated constraint of a request body."""

    property: str
    constraint: str
    message: str = ""

    def __str__(self) -> str:
        return f"{self.property} ({self.constraint})"


class JsonSchemaValidator:
    """Validate parsed JSON documents against one schema."""

    def __init__(self, schema: Mapping[str, Any]):
        cls = validator_for(schema, default=jsonschema.Draft7Validator)
        try:
            cls.check_schema(schema)
        except JsonSchemaDefinitionError as exc:
            raise ConfigurationError(f"Invalid JSON schema: {exc.message}") from exc
        self.schema = schema
        self._validator = cls(schema)

    def validate(self, document: Any) -> List[SchemaError]:
        errors: List[SchemaError] = []
        seen_required: Set[Tuple[str, str]] = set()

        try:
            for error in self._validator.iter_errors(document):
                path = _format_path(error.absolute_path)
                if error.validator == "required":
                    # jsonschema reports one error per missing member; name each one.
                    missing = _next_missing(error, path, seen_required)
                    if missing is not None:
                        seen_required.add((path, missing))
                        path = missing if path == ROOT_PROPERTY else f"{path}.{missing}"
                errors.append(SchemaError(property=path, constraint=str(error.validator), message=error.message))
        except RecursionError:
            logger.debug("Document nesting exceeded the recursion limit during schema validation")
            return [SchemaError(property=ROOT_PROPERTY, constraint="depth", message="Document is nested too deeply")]

        if errors:
            logger.debug("Schema validation produced %d error(s)", len(errors))
        return errors


def _format_path(parts) -> str:
    text = ""
    for part in parts:
        if isinstance(part, int):
            text += f"[{part}]"
        elif text:
            text += f".{part}"
        else:
            text = str(part)
    return text or ROOT_PROPERTY


def _next_missing(error, path: str, seen: Set[Tuple[str, str]]):
    instance = error.instance
    if not isinstance(instance, Mapping) or not isinstance(error.validator_value, (list, tuple)):
        return None
    for name in error.validator_value:
        if name not in instance and (path, name) not in seen:
            return name
    return None


__all__ = ["JsonSchemaValidator", "SchemaError", "ROOT_PROPERTY"]
