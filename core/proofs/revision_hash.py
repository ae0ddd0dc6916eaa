"""
Revision Hashing
Derive a revision's leaf hash from its raw content instead of trusting the
hash field returned with it.

Revision Hash (Hard Contract):
    data_hash     = IonHash_sha256(data)
    metadata_hash = IonHash_sha256({id, version, txTime, txId})
    revision_hash = join_hashes_pairwise(data_hash, metadata_hash)

This is the ledger's own leaf-hash computation. ``txTime`` is hashed as an
Ion timestamp at millisecond precision in UTC, the precision the ledger
commits with. Ion Hash sorts struct field digests, so field order never
changes the result.
"""
from __future__ import annotations

import logging
from typing import Any

from core.crypto.hashing import compare_hashes, join_hashes_pairwise, to_base64
from core.schemas.ion import ion_hash, ion_timestamp
from core.schemas.ledger import Revision, RevisionMetadataFields


logger = logging.getLogger(__name__)


def metadata_ion_value(metadata: RevisionMetadataFields | dict[str, Any]) -> dict[str, Any]:
    """The metadata struct the ledger hashes, with Ion field names."""
    if not isinstance(metadata, RevisionMetadataFields):
        # Normalize through the model so snake_case and camelCase agree
        metadata = RevisionMetadataFields.model_validate(metadata)
    return {
        "id": str(metadata.id),
        "version": int(metadata.version),
        "txTime": ion_timestamp(metadata.tx_time),
        "txId": str(metadata.tx_id),
    }


def revision_part_hashes(
    data: Any,
    metadata: RevisionMetadataFields | dict[str, Any],
) -> tuple[bytes, bytes]:
    """Ion hashes of a revision's data and of its metadata."""
    return ion_hash(data), ion_hash(metadata_ion_value(metadata))


def canonicalize_revision(
    data: Any,
    metadata: RevisionMetadataFields | dict[str, Any],
) -> bytes:
    """
    Canonical byte encoding of a revision's content and metadata.

    The two Ion hashes, smaller first under compare_hashes: exactly the
    64 bytes whose SHA-256 is the revision hash.

    Raises:
        CanonicalizationException: If data has no Ion representation
    """
    data_hash, metadata_hash = revision_part_hashes(data, metadata)
    if compare_hashes(data_hash, metadata_hash) < 0:
        return data_hash + metadata_hash
    return metadata_hash + data_hash


def compute_revision_hash(
    data: Any,
    metadata: RevisionMetadataFields | dict[str, Any],
) -> bytes:
    """
    Compute the leaf hash of a revision from its content.

    Returns:
        32-byte revision hash

    Raises:
        CanonicalizationException: If data has no Ion representation
    """
    data_hash, metadata_hash = revision_part_hashes(data, metadata)
    return join_hashes_pairwise(data_hash, metadata_hash)


def validate_revision_hash(revision: Revision) -> bool:
    """
    Check a revision's hash field against its own content.

    Returns:
        True if compute_revision_hash(data, metadata) equals revision.hash
    """
    candidate = compute_revision_hash(revision.data, revision.metadata)
    logger.debug(
        "Candidate revision hash %s, ledger revision hash %s",
        to_base64(candidate),
        to_base64(revision.hash),
    )
    return candidate == revision.hash


__all__ = [
    "canonicalize_revision",
    "compute_revision_hash",
    "metadata_ion_value",
    "revision_part_hashes",
    "validate_revision_hash",
]
