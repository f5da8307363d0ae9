# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Exception hierarchy for the reqcheck package.

Two families live here:

* ``ReqcheckError`` subclasses that describe a broken setup
  (``ConfigurationError``) or a route the contract does not know
  (``ContractNotFoundError``).
* ``ValidationFailure`` subclasses, one per failure kind of the request
  validation pipeline. They are returned inside a ``ValidationOutcome`` by
  ``RequestValidator.check`` and raised by ``RequestValidator.validate_request``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .validation.base import ValidationViolation
    from .validation.schema import SchemaError


class ReqcheckError(Exception):
    """Base class for every error raised by reqcheck."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(ReqcheckError):
    """The contract bundle or runtime settings are invalid."""


class ContractNotFoundError(ReqcheckError):
    """No contract entry exists for the requested method and path."""

    def __init__(self, method: str, path: str, reason: Optional[str] = None):
        self.method = method
        self.path = path
        message = f"No contract declared for `{method.upper()} {path}`"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class FailureKind(str, Enum):
    MEDIA_TYPE = "media_type"
    MISSING_PARAMETER = "missing_parameter"
    PARAMETER_VALUE = "parameter_value"
    MALFORMED_BODY = "malformed_body"
    BODY_SCHEMA = "body_schema"


class ValidationFailure(ReqcheckError):
    """A request does not conform to its contract."""

    kind: FailureKind

    def __init__(self, message: str, *, method: str, path: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.method = method
        self.path = path
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class MediaTypeFailure(ValidationFailure):
    """The Accept header is absent or matches none of the response media types."""

    kind = FailureKind.MEDIA_TYPE

    def __init__(self, message: str, *, method: str, path: str, accept: str = "", offered: Sequence[str] = ()):
        super().__init__(message, method=method, path=path)
        self.accept = accept
        self.offered = list(offered)


class MissingParameterFailure(ValidationFailure):
    kind = FailureKind.MISSING_PARAMETER

    def __init__(self, message: str, *, method: str, path: str, missing: Sequence[str]):
        super().__init__(message, method=method, path=path)
        self.missing = list(missing)


class ParameterValueFailure(ValidationFailure):
    kind = FailureKind.PARAMETER_VALUE

    def __init__(
        self,
        message: str,
        *,
        method: str,
        path: str,
        parameter: str,
        violations: Sequence["ValidationViolation"] = (),
    ):
        super().__init__(message, method=method, path=path)
        self.parameter = parameter
        self.violations = list(violations)


class MalformedBodyFailure(ValidationFailure):
    """The body could not be parsed (for example invalid JSON)."""

    kind = FailureKind.MALFORMED_BODY

    def __init__(
        self,
        message: str,
        *,
        method: str,
        path: str,
        content_type: str = "",
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, method=method, path=path, cause=cause)
        self.content_type = content_type


class BodySchemaFailure(ValidationFailure):
    """A syntactically valid body violates its JSON schema."""

    kind = FailureKind.BODY_SCHEMA

    def __init__(self, message: str, *, method: str, path: str, content_type: str, errors: Sequence["SchemaError"]):
        super().__init__(message, method=method, path=path)
        self.content_type = content_type
        self.errors = list(errors)


class UnsupportedContentTypeFailure(BodySchemaFailure):
    """Strict mode: the route declares bodies but none for this content type."""


__all__ = [
    "ReqcheckError",
    "ConfigurationError",
    "ContractNotFoundError",
    "FailureKind",
    "ValidationFailure",
    "MediaTypeFailure",
    "MissingParameterFailure",
    "ParameterValueFailure",
    "MalformedBodyFailure",
    "BodySchemaFailure",
    "UnsupportedContentTypeFailure",
]
