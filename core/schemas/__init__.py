"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Ion codec and hashing
from .ion import (
    ION_HASH_ALGORITHM,
    dump_ion_text,
    ensure_utc,
    format_ion_timestamp,
    ion_hash,
    ion_timestamp,
    ion_to_json,
    load_ion,
    parse_ion_blob_list,
    parse_ion_struct,
    to_ion_value,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    DocumentNotFoundException,
    EmptyInputException,
    ErrorCodes,
    InvalidHashLengthException,
    LedgerClientException,
    LedgerProofError,
    LedgerProofException,
    MetadataMismatchException,
    MISMATCH_FIELDS,
    ProofFormatException,
    TamperCheckException,
)

# Ledger schemas
from .ledger import (
    BlockAddress,
    BlockWithProof,
    DocumentLocator,
    HashBytes,
    LedgerDigest,
    ProofHashes,
    Revision,
    RevisionMetadata,
    RevisionMetadataFields,
    RevisionWithProof,
)

__all__ = [
    # Ion
    "ION_HASH_ALGORITHM",
    "dump_ion_text",
    "ensure_utc",
    "format_ion_timestamp",
    "ion_hash",
    "ion_timestamp",
    "ion_to_json",
    "load_ion",
    "parse_ion_blob_list",
    "parse_ion_struct",
    "to_ion_value",
    # Errors
    "CanonicalizationException",
    "DocumentNotFoundException",
    "EmptyInputException",
    "ErrorCodes",
    "InvalidHashLengthException",
    "LedgerClientException",
    "LedgerProofError",
    "LedgerProofException",
    "MetadataMismatchException",
    "MISMATCH_FIELDS",
    "ProofFormatException",
    "TamperCheckException",
    # Ledger
    "BlockAddress",
    "BlockWithProof",
    "DocumentLocator",
    "HashBytes",
    "LedgerDigest",
    "ProofHashes",
    "Revision",
    "RevisionMetadata",
    "RevisionMetadataFields",
    "RevisionWithProof",
]
