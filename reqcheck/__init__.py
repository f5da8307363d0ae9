"""reqcheck - validate HTTP requests against an API contract.

Typical use::

    from reqcheck import HttpRequest, load_validator

    validator = load_validator("contract.yaml")
    outcome = validator.check(HttpRequest.from_url("GET", "/users?limit=10",
                                                   headers={"Accept": "application/json"}))
    if not outcome.ok:
        print(outcome.failure.kind, outcome.failure.message)
"""

from ._version import __version__
from .contract import BundleSchemaStore, ContractBundle, ContractSchemaStore, load_contract_file
from .exceptions import (
    BodySchemaFailure,
    ConfigurationError,
    ContractNotFoundError,
    FailureKind,
    MalformedBodyFailure,
    MediaTypeFailure,
    MissingParameterFailure,
    ParameterValueFailure,
    ReqcheckError,
    UnsupportedContentTypeFailure,
    ValidationFailure,
)
from .negotiation import AcceptNegotiator
from .request import HttpRequest, Request
from .validator import RequestValidator, ValidationOutcome, load_validator

__all__ = [
    "__version__",
    "AcceptNegotiator",
    "BodySchemaFailure",
    "BundleSchemaStore",
    "ConfigurationError",
    "ContractBundle",
    "ContractNotFoundError",
    "ContractSchemaStore",
    "FailureKind",
    "HttpRequest",
    "MalformedBodyFailure",
    "MediaTypeFailure",
    "MissingParameterFailure",
    "ParameterValueFailure",
    "Request",
    "RequestValidator",
    "ReqcheckError",
    "UnsupportedContentTypeFailure",
    "ValidationFailure",
    "ValidationOutcome",
    "load_contract_file",
    "load_validator",
]
