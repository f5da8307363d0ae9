"""Validation package - parameter constraints and body schemas.

This package provides pure validation (constraint checking) for the two
value-level collaborators of the request pipeline: raw query parameter
values and parsed JSON bodies. No transformation happens here.
"""

from .base import ValidationContext, ValidationResult, ValidationViolation
from .constraints import ConstraintEvaluator
from .schema import JsonSchemaValidator, SchemaError

__all__ = [
    "ConstraintEvaluator",
    "JsonSchemaValidator",
    "SchemaError",
    "ValidationContext",
    "ValidationResult",
    "ValidationViolation",
]
