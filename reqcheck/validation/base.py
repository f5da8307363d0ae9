# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Shared value objects for parameter validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List


@dataclass
class ValidationViolation:
    """A single constraint a parameter value failed to satisfy."""

    argument: str
    operator: str
    expected: Any
    actual: Any
    message: str


@dataclass
class ValidationResult:
    """Outcome of validating one value: ``allowed`` plus any violations."""

    allowed: bool = True
    violations: List[ValidationViolation] = field(default_factory=list)

    def add(self, violation: ValidationViolation) -> None:
        self.violations.append(violation)
        self.allowed = False

    def merge(self, other: "ValidationResult") -> None:
        if other.violations:
            self.violations.extend(other.violations)
        if not other.allowed:
            self.allowed = False

    @property
    def message(self) -> str:
        return "; ".join(v.message for v in self.violations)


@dataclass(frozen=True)
class ValidationContext:
    """Identifies the parameter being evaluated, used for violation messages."""

    argument: str


__all__ = ["ValidationContext", "ValidationResult", "ValidationViolation"]
