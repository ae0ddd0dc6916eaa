"""
Core cryptographic utilities.

Provides SHA-256 hashing, the ledger hash ordering and pairwise combination.
"""
from .hashing import (
    EMPTY_HASH,
    HASH_LENGTH,
    compare_hashes,
    from_base64,
    hash_of,
    hash_sort_key,
    join_hashes_pairwise,
    sha256,
    to_base64,
)

__all__ = [
    "EMPTY_HASH",
    "HASH_LENGTH",
    "compare_hashes",
    "from_base64",
    "hash_of",
    "hash_sort_key",
    "join_hashes_pairwise",
    "sha256",
    "to_base64",
]
