"""Contract package - bundle parsing, lookups and file loading."""

from .bundle import BodySchema, ContractBundle, NamedParameter, ResponseSchema
from .files import iter_contract_candidates, load_contract_file, locate_contract_file
from .store import BundleSchemaStore, ContractSchemaStore, SupportsBodyTypes

__all__ = [
    "BodySchema",
    "BundleSchemaStore",
    "ContractBundle",
    "ContractSchemaStore",
    "NamedParameter",
    "ResponseSchema",
    "SupportsBodyTypes",
    "iter_contract_candidates",
    "load_contract_file",
    "locate_contract_file",
]
