"""
Hashing Utilities
SHA-256 hashing, ledger hash ordering and pairwise hash combination.

This module provides:
- SHA-256 hashing for raw bytes and for streamed chunks
- The ledger's hash ordering (signed bytes, compared last byte first)
- Pairwise combination of two hashes into their parent hash
- Base64 encoding/decoding for hashes at system boundaries

Security/Determinism Notes:
- Hashes are plain ``bytes`` values and are never mutated
- Internal computation always operates on raw bytes, never on Base64 text
- The ordering rule decides which operand is concatenated first; a different
  rule yields different digests that still look like valid hashes
"""
from __future__ import annotations

import base64
import binascii
import hashlib
from typing import Iterable

from core.schemas.errors import InvalidHashLengthException, ProofFormatException


# Length of every non-empty ledger hash
HASH_LENGTH: int = 32

# Identity element for join_hashes_pairwise
EMPTY_HASH: bytes = b""


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_of(chunks: bytes | Iterable[bytes]) -> bytes:
    """
    Stream one or more byte chunks through a single SHA-256 context.

    ``hash_of([a, b])`` equals ``sha256(a + b)`` without building the
    concatenation in memory.

    Args:
        chunks: Raw bytes, or an iterable of byte chunks in order

    Returns:
        32-byte SHA-256 digest
    """
    hasher = hashlib.sha256()
    if isinstance(chunks, (bytes, bytearray, memoryview)):
        hasher.update(chunks)
    else:
        for chunk in chunks:
            hasher.update(chunk)
    return hasher.digest()


def _signed(byte: int) -> int:
    return byte - 256 if byte > 127 else byte


def compare_hashes(hash1: bytes, hash2: bytes) -> int:
    """
    Compare two hashes using the ledger's ordering.

    Each byte is read as a signed 8-bit integer and bytes are scanned from
    the last to the first. The result is the signed difference of the first
    non-matching pair, or 0 when the hashes are equal.

    Args:
        hash1: 32-byte hash
        hash2: 32-byte hash

    Returns:
        Negative if hash1 orders first, positive if hash2 does, 0 if equal

    Raises:
        InvalidHashLengthException: If either operand is not 32 bytes

    Example:
        >>> compare_hashes(bytes(31) + b"\\x80", bytes(31) + b"\\x7f")
        -255
    """
    if len(hash1) != HASH_LENGTH or len(hash2) != HASH_LENGTH:
        raise InvalidHashLengthException(
            f"Hashes must be {HASH_LENGTH} bytes, "
            f"got {len(hash1)} and {len(hash2)}",
            lengths=(len(hash1), len(hash2)),
        )
    for i in range(HASH_LENGTH - 1, -1, -1):
        difference = _signed(hash1[i]) - _signed(hash2[i])
        if difference != 0:
            return difference
    return 0


def hash_sort_key(value: bytes) -> tuple[int, ...]:
    """
    Sort key matching compare_hashes, for use with ``sorted()``.

    Raises:
        InvalidHashLengthException: If value is not 32 bytes
    """
    if len(value) != HASH_LENGTH:
        raise InvalidHashLengthException(
            f"Hash must be {HASH_LENGTH} bytes, got {len(value)}",
            lengths=(len(value),),
        )
    return tuple(_signed(b) for b in reversed(value))


def join_hashes_pairwise(h1: bytes, h2: bytes) -> bytes:
    """
    Combine two hashes into their parent hash.

    Rules:
    1. If either operand is empty, the other is returned unchanged
    2. Otherwise the operand that orders first (compare_hashes) is
       concatenated first, independent of argument order
    3. parent = sha256(first + second)

    The operation is commutative: join(h1, h2) == join(h2, h1).

    Args:
        h1: 32-byte hash or EMPTY_HASH
        h2: 32-byte hash or EMPTY_HASH

    Returns:
        32-byte parent hash (or the non-empty operand)

    Raises:
        InvalidHashLengthException: If a non-empty operand is not 32 bytes
    """
    if len(h1) == 0:
        return bytes(h2)
    if len(h2) == 0:
        return bytes(h1)
    if compare_hashes(h1, h2) < 0:
        return hash_of((h1, h2))
    return hash_of((h2, h1))


def to_base64(data: bytes) -> str:
    """
    Encode bytes as standard Base64 (with padding).

    Example:
        >>> to_base64(b"\\x01\\x02")
        'AQI='
    """
    return base64.b64encode(data).decode("ascii")


def from_base64(text: str) -> bytes:
    """
    Decode standard Base64 text.

    Raises:
        ProofFormatException: If the text is not valid Base64
    """
    try:
        return base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ProofFormatException(
            f"Invalid Base64 value: {e}",
            details={"value": text[:64]},
        ) from e


__all__ = [
    "HASH_LENGTH",
    "EMPTY_HASH",
    "sha256",
    "hash_of",
    "compare_hashes",
    "hash_sort_key",
    "join_hashes_pairwise",
    "to_base64",
    "from_base64",
]
