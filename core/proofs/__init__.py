"""
Ledger Proofs
Digest recomputation, revision hashing and tamper self-checks.

Canonical Rules:
1. Pairwise combination: sha256(smaller + larger) under compare_hashes
2. Digest recomputation: left fold over the proof, leaf first
3. Revision hash: join(ion_hash(data), ion_hash(metadata))

Usage:
    from core.proofs import parse_proof, recompute_digest, verify_digest

    proof = parse_proof(revision_response["proof"])
    candidate = recompute_digest(revision_hash, proof)
    assert verify_digest(revision_hash, proof, ledger_digest)
"""
from .digest import (
    fold_steps,
    parse_proof,
    recompute_digest,
    verify_digest,
)

from .revision_hash import (
    canonicalize_revision,
    compute_revision_hash,
    metadata_ion_value,
    validate_revision_hash,
)

from .tamper import (
    assert_tamper_evident,
    flip_random_bit,
)

from .tree import (
    build_digest_root,
    build_inclusion_proof,
)


__all__ = [
    # Digest
    "fold_steps",
    "parse_proof",
    "recompute_digest",
    "verify_digest",
    # Revision hash
    "canonicalize_revision",
    "compute_revision_hash",
    "metadata_ion_value",
    "validate_revision_hash",
    # Tamper self-check
    "assert_tamper_evident",
    "flip_random_bit",
    # Tree construction
    "build_digest_root",
    "build_inclusion_proof",
]
