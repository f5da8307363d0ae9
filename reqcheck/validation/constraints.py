# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Constraint evaluation for query parameter values.

Query parameters always arrive as raw strings. The evaluator interprets them
according to the declared ``type`` before applying numeric bounds, so
``{"type": "integer", "maximum": 10}`` rejects both ``"abc"`` and ``"11"``.

Supported operators:

========== =====================================================
required   value must be present
type       string | integer | number | boolean | date
enum       value must equal one of the listed options
pattern    regular expression (``re.search`` semantics)
minLength  minimum string length
maxLength  maximum string length
minimum    inclusive lower numeric bound
maximum    inclusive upper numeric bound
========== =====================================================

``description``, ``default`` and ``example`` are annotations and ignored.
Any other key is rejected with ``ConfigurationError`` so typos never turn
into silently unenforced rules.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date
from typing import Any, Dict, Mapping, Optional, Pattern

from ..exceptions import ConfigurationError
from .base import ValidationContext, ValidationResult, ValidationViolation

logger = logging.getLogger(__name__)

KNOWN_OPERATORS = frozenset(
    {"required", "type", "enum", "pattern", "minLength", "maxLength", "minimum", "maximum"}
)
ANNOTATION_KEYS = frozenset({"description", "default", "example"})
PARAMETER_TYPES = frozenset({"string", "integer", "number", "boolean", "date"})

_INTEGER_RE = re.compile(r"^[-+]?\d+$")


class ConstraintEvaluator:
    """Evaluate declarative constraint rules against a raw string value."""

    def __init__(self) -> None:
        self._patterns: Dict[str, Pattern[str]] = {}

    # ------------------------------------------------------------------
    # Load-time checks
    # ------------------------------------------------------------------

    def check_rules(self, argument: str, rules: Mapping[str, Any]) -> None:
        """Reject unknown operators, bad types and malformed patterns."""

        unknown = [key for key in rules if key not in KNOWN_OPERATORS and key not in ANNOTATION_KEYS]
        if unknown:
            valid = ", ".join(sorted(KNOWN_OPERATORS))
            raise ConfigurationError(
                f"Unknown operator(s) {sorted(unknown)} for parameter '{argument}'. "
                f"Valid operators: {valid}"
            )

        declared_type = rules.get("type")
        if declared_type is not None and declared_type not in PARAMETER_TYPES:
            raise ConfigurationError(
                f"Unknown type '{declared_type}' for parameter '{argument}'. "
                f"Expected one of: {', '.join(sorted(PARAMETER_TYPES))}"
            )

        if "enum" in rules and not isinstance(rules["enum"], (list, tuple)):
            raise ConfigurationError(f"'enum' for parameter '{argument}' must be a list")

        for bound in ("minLength", "maxLength"):
            if bound in rules and (isinstance(rules[bound], bool) or not isinstance(rules[bound], int)):
                raise ConfigurationError(f"'{bound}' for parameter '{argument}' must be an integer")

        for bound in ("minimum", "maximum"):
            if bound in rules and (isinstance(rules[bound], bool) or not isinstance(rules[bound], (int, float))):
                raise ConfigurationError(f"'{bound}' for parameter '{argument}' must be a number")

        if "pattern" in rules:
            self._compile(argument, rules["pattern"])

    def _compile(self, argument: str, pattern: Any) -> Pattern[str]:
        if not isinstance(pattern, str):
            raise ConfigurationError(f"'pattern' for parameter '{argument}' must be a string")
        compiled = self._patterns.get(pattern)
        if compiled is None:
            try:
                compiled = re.compile(pattern)
            except re.error as exc:
                logger.error("Invalid regex pattern for parameter '%s': %s", argument, exc)
                raise ConfigurationError(
                    f"Invalid regex pattern for parameter '{argument}': {pattern!r} ({exc})"
                ) from exc
            self._patterns[pattern] = compiled
        return compiled

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(
        self,
        rules: Mapping[str, Any],
        *,
        value_present: bool,
        value: Optional[str],
        context: ValidationContext,
    ) -> ValidationResult:
        result = ValidationResult(allowed=True)
        name = context.argument

        if not value_present:
            if rules.get("required"):
                result.add(
                    ValidationViolation(
                        argument=name,
                        operator="required",
                        expected=True,
                        actual=None,
                        message=f"Parameter '{name}' is required but missing",
                    )
                )
            return result

        text = "" if value is None else str(value)

        declared_type = rules.get("type")
        number: Optional[float] = None
        if declared_type is not None:
            ok, number = _coerce(declared_type, text)
            if not ok:
                result.add(
                    ValidationViolation(
                        argument=name,
                        operator="type",
                        expected=declared_type,
                        actual=text,
                        message=f"Parameter '{name}' must be of type {declared_type}, got {text!r}",
                    )
                )

        if "enum" in rules:
            options = [_enum_text(option) for option in rules["enum"]]
            if text not in options:
                result.add(
                    ValidationViolation(
                        argument=name,
                        operator="enum",
                        expected=list(rules["enum"]),
                        actual=text,
                        message=f"Parameter '{name}' must be one of {options}, got {text!r}",
                    )
                )

        if "pattern" in rules:
            compiled = self._compile(name, rules["pattern"])
            if compiled.search(text) is None:
                result.add(
                    ValidationViolation(
                        argument=name,
                        operator="pattern",
                        expected=rules["pattern"],
                        actual=text,
                        message=f"Parameter '{name}' does not match pattern {rules['pattern']!r}",
                    )
                )

        if "minLength" in rules and len(text) < rules["minLength"]:
            result.add(
                ValidationViolation(
                    argument=name,
                    operator="minLength",
                    expected=rules["minLength"],
                    actual=len(text),
                    message=f"Parameter '{name}' must be at least {rules['minLength']} characters long",
                )
            )

        if "maxLength" in rules and len(text) > rules["maxLength"]:
            result.add(
                ValidationViolation(
                    argument=name,
                    operator="maxLength",
                    expected=rules["maxLength"],
                    actual=len(text),
                    message=f"Parameter '{name}' must be at most {rules['maxLength']} characters long",
                )
            )

        if "minimum" in rules or "maximum" in rules:
            if number is None:
                ok, number = _coerce("number", text)
                if not ok:
                    number = None
            if number is None:
                # A failed ``type`` check already explains the problem.
                if declared_type in (None, "string", "boolean", "date"):
                    result.add(
                        ValidationViolation(
                            argument=name,
                            operator="minimum" if "minimum" in rules else "maximum",
                            expected=rules.get("minimum", rules.get("maximum")),
                            actual=text,
                            message=f"Parameter '{name}' must be numeric to compare against its bounds, got {text!r}",
                        )
                    )
            else:
                if "minimum" in rules and number < rules["minimum"]:
                    result.add(
                        ValidationViolation(
                            argument=name,
                            operator="minimum",
                            expected=rules["minimum"],
                            actual=number,
                            message=f"Parameter '{name}' must be >= {rules['minimum']}, got {text}",
                        )
                    )
                if "maximum" in rules and number > rules["maximum"]:
                    result.add(
                        ValidationViolation(
                            argument=name,
                            operator="maximum",
                            expected=rules["maximum"],
                            actual=number,
                            message=f"Parameter '{name}' must be <= {rules['maximum']}, got {text}",
                        )
                    )

        return result


def _coerce(declared_type: str, text: str):
    """Return ``(ok, number)``; *number* is set for numeric types only."""

    if declared_type == "string":
        return True, None
    if declared_type == "integer":
        if _INTEGER_RE.match(text):
            return True, int(text)
        return False, None
    if declared_type == "number":
        try:
            number = float(text)
        except ValueError:
            return False, None
        if not math.isfinite(number):
            return False, None
        return True, number
    if declared_type == "boolean":
        return text.lower() in ("true", "false"), None
    if declared_type == "date":
        try:
            date.fromisoformat(text)
        except ValueError:
            return False, None
        return True, None
    return False, None


def _enum_text(option: Any) -> str:
    if isinstance(option, bool):
        return "true" if option else "false"
    return str(option)


__all__ = ["ConstraintEvaluator", "KNOWN_OPERATORS", "PARAMETER_TYPES"]
