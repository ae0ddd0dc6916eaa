"""
Digest Recomputation
Reduce a leaf hash across a proof chain into a candidate ledger digest.

This module provides:
- parse_proof: decode an external proof representation into ordered hashes
- recompute_digest: left fold of join_hashes_pairwise over the proof
- verify_digest: compare the candidate digest with a published digest

Folding Rules (Hard Contracts):
1. Start from the leaf hash (revision hash or block hash)
2. acc = join_hashes_pairwise(acc, proof[i]) for i in proof order
3. The final accumulator is the candidate digest
4. An empty proof yields the leaf itself
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from core.crypto.hashing import from_base64, join_hashes_pairwise, to_base64
from core.schemas.errors import ProofFormatException
from core.schemas.ion import parse_ion_blob_list


logger = logging.getLogger(__name__)


def parse_proof(proof: Any) -> list[bytes]:
    """
    Decode an external proof representation into an ordered hash list.

    Accepted forms:
    - Ion text list of blobs: ``"[{{<base64>}},{{<base64>}}]"``
    - A value holder: ``{"IonText": "[{{...}}]"}``
    - A sequence whose items are raw bytes or Base64 strings

    Args:
        proof: External proof value

    Returns:
        Sibling hashes in the order they must be folded (leaf first)

    Raises:
        ProofFormatException: If the value cannot be decoded
    """
    if isinstance(proof, str):
        return parse_ion_blob_list(proof)
    if isinstance(proof, dict):
        if "IonText" not in proof:
            raise ProofFormatException(
                "Proof value holder must contain IonText",
                details={"keys": sorted(proof)},
            )
        return parse_ion_blob_list(proof["IonText"])
    if isinstance(proof, (list, tuple)):
        hashes: list[bytes] = []
        for i, item in enumerate(proof):
            if isinstance(item, (bytes, bytearray)):
                hashes.append(bytes(item))
            elif isinstance(item, str):
                hashes.append(from_base64(item))
            else:
                raise ProofFormatException(
                    f"Proof element {i} has unsupported type {type(item).__name__}",
                    details={"index": i},
                )
        return hashes
    raise ProofFormatException(
        f"Unsupported proof representation: {type(proof).__name__}",
    )


def recompute_digest(leaf: bytes, proof: Iterable[bytes]) -> bytes:
    """
    Recompute the candidate digest for a leaf hash.

    Args:
        leaf: Revision or block hash (32 bytes)
        proof: Sibling hashes, leaf first

    Returns:
        Candidate digest (32 bytes)

    Raises:
        InvalidHashLengthException: If any operand is not 32 bytes
    """
    candidate = leaf
    for sibling in proof:
        candidate = join_hashes_pairwise(candidate, sibling)
    return candidate


def fold_steps(leaf: bytes, proof: Sequence[bytes]) -> list[bytes]:
    """
    Intermediate accumulators of recompute_digest, one per proof element.

    The last element equals recompute_digest(leaf, proof). Useful when
    locating the level at which two chains diverge.
    """
    steps: list[bytes] = []
    candidate = leaf
    for sibling in proof:
        candidate = join_hashes_pairwise(candidate, sibling)
        steps.append(candidate)
    return steps


def verify_digest(leaf: bytes, proof: Iterable[bytes], digest: bytes) -> bool:
    """
    Check that a leaf hash and proof reproduce a published digest.

    A mismatch is a result, not an error: the published digest may simply
    not cover the leaf's chain position yet.

    Args:
        leaf: Revision or block hash
        proof: Sibling hashes, leaf first
        digest: Published ledger digest

    Returns:
        True if the recomputed digest equals the published one
    """
    candidate = recompute_digest(leaf, proof)
    logger.debug("Ledger digest received: %s", to_base64(digest))
    logger.debug("Ledger digest derived : %s", to_base64(candidate))
    return candidate == digest


__all__ = [
    "parse_proof",
    "recompute_digest",
    "fold_steps",
    "verify_digest",
]
