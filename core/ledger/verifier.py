"""
Metadata Verification

Check a captured RevisionMetadata bundle against current ledger state:

1. Fetch the revision and its proof up to the bundle's digest tip
2. Reconcile revision hash, document id and block address
3. Fold the proof over the asserted revision hash
4. Compare the candidate with the bundle's digest

Any reconciliation failure raises MetadataMismatchException before a digest
is computed. A digest mismatch is reported as False.
"""
from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Iterable, Optional

from core.crypto.hashing import to_base64
from core.proofs import digest as digest_ops
from core.proofs.revision_hash import validate_revision_hash
from core.proofs.tamper import assert_tamper_evident
from core.schemas.errors import MetadataMismatchException
from core.schemas.ledger import BlockAddress, RevisionMetadata

from .client import LedgerClient


logger = logging.getLogger(__name__)


class VerificationStage(str, Enum):
    """Progress of a single verify() call."""
    FETCHED = "FETCHED"
    HASH_MATCHED = "HASH_MATCHED"
    ID_MATCHED = "ID_MATCHED"
    ADDRESS_MATCHED = "ADDRESS_MATCHED"
    DIGEST_MATCHED = "DIGEST_MATCHED"


class MetadataVerifier:
    """
    Verifies RevisionMetadata bundles through a LedgerClient.

    Args:
        client: Ledger collaborator used to re-fetch the revision
        validate_content: Also recompute the revision hash from the fetched
            data and metadata instead of trusting the ledger's hash field
        rng: Random source for the optional tamper self-check
    """

    def __init__(
        self,
        client: LedgerClient,
        *,
        validate_content: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.client = client
        self.validate_content = validate_content
        self._rng = rng

    def recompute_digest(self, leaf: bytes, proof: Iterable[bytes]) -> bytes:
        """Candidate digest for a leaf hash and proof."""
        return digest_ops.recompute_digest(leaf, proof)

    def _advance(self, stage: VerificationStage, metadata: RevisionMetadata) -> None:
        logger.debug("%s: %s", metadata.document_id, stage.value)

    def verify(self, metadata: RevisionMetadata, *, self_check: bool = False) -> bool:
        """
        Verify a captured bundle.

        Args:
            metadata: The bundle to check
            self_check: After a successful verification, also demonstrate
                that single-bit changes to the hash or digest are detected

        Returns:
            True if the proof reproduces the bundle's digest

        Raises:
            MetadataMismatchException: If the ledger disagrees with the bundle
            TamperCheckException: If self_check is set and fails
            LedgerClientException: If the ledger cannot be read
        """
        fetched = self.client.fetch_revision(
            metadata.ledger_name,
            metadata.document_id,
            metadata.block_address,
            metadata.ledger_digest.digest_tip_address,
        )
        revision = fetched.revision
        self._advance(VerificationStage.FETCHED, metadata)

        if revision.hash != metadata.revision_hash:
            raise MetadataMismatchException(
                "revisionHash",
                expected=to_base64(metadata.revision_hash),
                actual=to_base64(revision.hash),
            )
        if self.validate_content and not validate_revision_hash(revision):
            raise MetadataMismatchException(
                "revisionHash",
                expected=to_base64(metadata.revision_hash),
                actual="content does not hash to the ledger revision hash",
            )
        self._advance(VerificationStage.HASH_MATCHED, metadata)

        if revision.metadata.id != metadata.document_id:
            raise MetadataMismatchException(
                "documentId",
                expected=metadata.document_id,
                actual=revision.metadata.id,
            )
        self._advance(VerificationStage.ID_MATCHED, metadata)

        if revision.block_address != metadata.block_address:
            raise MetadataMismatchException(
                "blockAddress",
                expected=str(metadata.block_address),
                actual=str(revision.block_address),
            )
        self._advance(VerificationStage.ADDRESS_MATCHED, metadata)

        proof = list(fetched.proof)
        candidate = self.recompute_digest(metadata.revision_hash, proof)
        expected = metadata.ledger_digest.digest
        logger.debug("Ledger digest received: %s", to_base64(expected))
        logger.debug("Ledger digest derived : %s", to_base64(candidate))
        verified = candidate == expected
        logger.debug("%s: %s=%s", metadata.document_id, VerificationStage.DIGEST_MATCHED.value, verified)

        if not verified:
            logger.warning(
                "Revision %s of %s does not verify against the ledger digest",
                to_base64(metadata.revision_hash), metadata.document_id,
            )
        elif self_check:
            assert_tamper_evident(metadata.revision_hash, proof, expected, self._rng)
        return verified


class BlockVerifier:
    """
    Verifies a journal block's hash against the current ledger digest.
    """

    def __init__(self, client: LedgerClient, *, rng: Optional[random.Random] = None) -> None:
        self.client = client
        self._rng = rng

    def verify(
        self,
        ledger_name: str,
        block_address: BlockAddress,
        *,
        self_check: bool = False,
    ) -> bool:
        """
        Fetch the current digest and the block with its proof, then check
        that the block hash folds to the digest.

        Returns:
            True if the block is covered by the digest
        """
        ledger_digest = self.client.fetch_digest(ledger_name)
        block = self.client.fetch_block(
            ledger_name, block_address, ledger_digest.digest_tip_address
        )
        proof = list(block.proof)
        verified = digest_ops.verify_digest(block.block_hash, proof, ledger_digest.digest)
        if not verified:
            logger.warning("Block %s does not verify against the ledger digest", block_address)
        elif self_check:
            assert_tamper_evident(block.block_hash, proof, ledger_digest.digest, self._rng)
        return verified


__all__ = [
    "VerificationStage",
    "MetadataVerifier",
    "BlockVerifier",
]
