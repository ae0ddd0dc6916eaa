"""
Tamper Self-Check
Single-bit mutations used to demonstrate that verification rejects altered
hashes. Not part of the production verification path.
"""
from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from core.crypto.hashing import to_base64
from core.proofs.digest import verify_digest
from core.schemas.errors import EmptyInputException, TamperCheckException


logger = logging.getLogger(__name__)

# Bits per byte
_BITS = 8


def flip_random_bit(original: bytes, rng: Optional[random.Random] = None) -> bytes:
    """
    Return a copy of ``original`` with one uniformly chosen bit flipped.

    The byte index and the bit position (0-7) are drawn independently.
    The input is never modified.

    Args:
        original: Hash (or any non-empty byte string) to alter
        rng: Random source; the module-level generator when omitted

    Returns:
        Altered copy, differing from ``original`` in exactly one bit

    Raises:
        EmptyInputException: If original is empty
    """
    if len(original) == 0:
        raise EmptyInputException("Cannot flip a bit in an empty value")
    source = rng or random
    byte_pos = source.randrange(len(original))
    bit_shift = source.randrange(_BITS)
    altered = bytearray(original)
    altered[byte_pos] ^= 1 << bit_shift
    return bytes(altered)


def assert_tamper_evident(
    leaf: bytes,
    proof: Iterable[bytes],
    digest: bytes,
    rng: Optional[random.Random] = None,
) -> None:
    """
    Demonstrate that a (leaf, proof, digest) triple is tamper evident.

    Checks, in order:
    1. The honest triple verifies
    2. Flipping one bit of the leaf makes verification fail
    3. Flipping one bit of the digest makes verification fail

    Raises:
        TamperCheckException: If any of the checks does not hold
    """
    proof = list(proof)

    if not verify_digest(leaf, proof, digest):
        raise TamperCheckException(
            "Unaltered hash does not verify against the digest",
            details={"leaf": to_base64(leaf), "digest": to_base64(digest)},
        )

    altered_leaf = flip_random_bit(leaf, rng)
    logger.debug("Altered leaf hash: %s", to_base64(altered_leaf))
    if verify_digest(altered_leaf, proof, digest):
        raise TamperCheckException(
            "Expected altered leaf hash to not be verified against digest",
            details={"altered_leaf": to_base64(altered_leaf)},
        )

    altered_digest = flip_random_bit(digest, rng)
    logger.debug("Altered digest: %s", to_base64(altered_digest))
    if verify_digest(leaf, proof, altered_digest):
        raise TamperCheckException(
            "Expected leaf hash to not be verified against altered digest",
            details={"altered_digest": to_base64(altered_digest)},
        )

    logger.debug("Flipping a single bit causes verification to fail, as expected")


__all__ = [
    "flip_random_bit",
    "assert_tamper_evident",
]
