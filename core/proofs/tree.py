"""
Digest Tree Construction
Build a ledger-style hash tree over ordered leaves and derive inclusion proofs.

This module provides:
- build_digest_root: Compute the root digest over leaf hashes
- build_inclusion_proof: Sibling hashes for one leaf, leaf first

The verifier never builds trees; this exists for the in-memory ledger and
for tests that need honest (leaf, proof, digest) triples.

Tree Rules:
1. Parent hashing: join_hashes_pairwise(left, right) (order-independent)
2. Odd node at any level is promoted unchanged to the next level
3. Single leaf: root = leaf, proof = []
4. Empty leaves: not allowed

Folding the proof from build_inclusion_proof with recompute_digest gives
build_digest_root, because join_hashes_pairwise is commutative.
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import join_hashes_pairwise


def _next_level(level: list[bytes]) -> list[bytes]:
    parents: list[bytes] = []
    for i in range(0, len(level) - 1, 2):
        parents.append(join_hashes_pairwise(level[i], level[i + 1]))
    if len(level) % 2 == 1:
        parents.append(level[-1])
    return parents


def build_digest_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build the root digest from a sequence of leaf hashes.

    Example: [a, b, c] -> [join(a, b), c] -> join(join(a, b), c)

    Args:
        leaves: Leaf hashes (32 bytes each). Order is preserved.

    Returns:
        32-byte root digest

    Raises:
        ValueError: If leaves is empty
    """
    if len(leaves) == 0:
        raise ValueError("Cannot build a digest over an empty leaf list")

    level: list[bytes] = list(leaves)
    while len(level) > 1:
        level = _next_level(level)
    return level[0]


def build_inclusion_proof(leaves: Sequence[bytes], index: int) -> list[bytes]:
    """
    Collect the sibling hashes that link leaves[index] to the root.

    Levels where the node has no sibling (promoted odd node) contribute
    nothing to the proof.

    Args:
        leaves: Leaf hashes
        index: 0-based index of the leaf to prove

    Returns:
        Sibling hashes, bottom-up (leaf first)

    Raises:
        ValueError: If leaves is empty
        IndexError: If index is out of range
    """
    if len(leaves) == 0:
        raise ValueError("Cannot generate proof for empty leaf list")

    if index < 0 or index >= len(leaves):
        raise IndexError(
            f"Leaf index {index} out of range for {len(leaves)} leaves"
        )

    siblings: list[bytes] = []
    level: list[bytes] = list(leaves)
    current_index = index

    while len(level) > 1:
        sibling_index = current_index ^ 1
        if sibling_index < len(level):
            siblings.append(level[sibling_index])
        level = _next_level(level)
        current_index = current_index // 2

    return siblings


__all__ = [
    "build_digest_root",
    "build_inclusion_proof",
]
