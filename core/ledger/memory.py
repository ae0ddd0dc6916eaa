"""
In-Memory Ledger

A single-strand journal kept in process memory. Every commit appends one
block holding one revision; digests, revision proofs and block proofs are
built from the same hash tree, so everything it returns verifies honestly.

Block hash of block n:
    join_hashes_pairwise(revision_hash, ion_hash(blockAddress))

Revision proofs therefore start with the block's address hash, followed by the
block's inclusion proof under the digest tip.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from core.crypto.hashing import join_hashes_pairwise
from core.proofs.revision_hash import compute_revision_hash
from core.proofs.tree import build_digest_root, build_inclusion_proof
from core.schemas.ion import ion_hash
from core.schemas.errors import DocumentNotFoundException, LedgerClientException
from core.schemas.ledger import (
    BlockAddress,
    BlockWithProof,
    DocumentLocator,
    LedgerDigest,
    Revision,
    RevisionMetadataFields,
    RevisionWithProof,
)


logger = logging.getLogger(__name__)

DEFAULT_STRAND_ID = "LedgerProofStrand00001"


@dataclass
class _Block:
    table_name: str
    revision: Revision
    address_hash: bytes

    @property
    def block_hash(self) -> bytes:
        return join_hashes_pairwise(self.revision.hash, self.address_hash)


class InMemoryLedger:
    """
    LedgerClient implementation backed by an in-process journal.

    Usage:
        ledger = InMemoryLedger("vehicles")
        revision = ledger.commit("VehicleRegistration", {"VIN": "1N4AL11D75C109151"},
                                 key_attribute="VIN")
        digest = ledger.fetch_digest("vehicles")

    ``digest_lag`` makes fetch_digest ignore that many of the most recent
    blocks, the way a published digest trails freshly committed data.
    """

    def __init__(
        self,
        ledger_name: str = "ledger",
        strand_id: str = DEFAULT_STRAND_ID,
        digest_lag: int = 0,
    ) -> None:
        self.ledger_name = ledger_name
        self.strand_id = strand_id
        self.digest_lag = digest_lag
        self.closed = False
        self._blocks: list[_Block] = []
        self._versions: dict[str, int] = {}
        self._keys: dict[tuple[str, str, str], str] = {}

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def commit(
        self,
        table_name: str,
        data: Any,
        *,
        key_attribute: Optional[str] = None,
        document_id: Optional[str] = None,
        tx_time: Optional[datetime] = None,
    ) -> Revision:
        """
        Append a revision of a document in a new block.

        When ``key_attribute`` is given, ``data[key_attribute]`` identifies the
        document: committing the same key again produces the next version of
        the same document id.

        Returns:
            The committed Revision
        """
        key: Optional[tuple[str, str, str]] = None
        if key_attribute is not None:
            key = (table_name, key_attribute, str(data[key_attribute]))
            document_id = document_id or self._keys.get(key)
        document_id = document_id or uuid.uuid4().hex
        if key is not None:
            self._keys[key] = document_id

        version = self._versions.get(document_id, -1) + 1
        self._versions[document_id] = version

        address = BlockAddress(strand_id=self.strand_id, sequence_no=len(self._blocks))
        metadata = RevisionMetadataFields(
            id=document_id,
            version=version,
            tx_time=tx_time or datetime.now(timezone.utc),
            tx_id=uuid.uuid4().hex,
        )
        revision = Revision(
            block_address=address,
            hash=compute_revision_hash(data, metadata),
            data=data,
            metadata=metadata,
        )
        self._blocks.append(
            _Block(
                table_name=table_name,
                revision=revision,
                address_hash=ion_hash(address.model_dump(by_alias=True)),
            )
        )
        logger.debug("Committed %s version %d at %s", document_id, version, address)
        return revision

    def tamper_data(self, block_address: BlockAddress, data: Any) -> None:
        """Replace a stored revision's content without touching its hash."""
        block = self._block_at(block_address)
        block.revision = block.revision.model_copy(update={"data": data})

    # ------------------------------------------------------------------
    # LedgerClient
    # ------------------------------------------------------------------

    def fetch_digest(self, ledger_name: str) -> LedgerDigest:
        self._check_ledger(ledger_name)
        covered = len(self._blocks) - self.digest_lag
        if covered <= 0:
            raise LedgerClientException(
                f"Ledger {ledger_name!r} has no digest yet",
                details={"ledger": ledger_name},
            )
        tip = self._blocks[covered - 1].revision.block_address
        return LedgerDigest(
            digest=build_digest_root(self._block_hashes(tip)),
            digest_tip_address=tip,
        )

    def fetch_revision(
        self,
        ledger_name: str,
        document_id: str,
        block_address: BlockAddress,
        digest_tip_address: BlockAddress,
    ) -> RevisionWithProof:
        self._check_ledger(ledger_name)
        block = self._block_at(block_address)
        leaves = self._covering_leaves(block_address, digest_tip_address)
        if block.revision.metadata.id != document_id:
            logger.debug(
                "Block %s holds document %s, not %s",
                block_address, block.revision.metadata.id, document_id,
            )
        proof = [block.address_hash]
        proof.extend(build_inclusion_proof(leaves, block_address.sequence_no))
        return RevisionWithProof(revision=block.revision, proof=proof)

    def fetch_block(
        self,
        ledger_name: str,
        block_address: BlockAddress,
        digest_tip_address: BlockAddress,
    ) -> BlockWithProof:
        self._check_ledger(ledger_name)
        block = self._block_at(block_address)
        leaves = self._covering_leaves(block_address, digest_tip_address)
        return BlockWithProof(
            block_address=block_address,
            block_hash=block.block_hash,
            proof=build_inclusion_proof(leaves, block_address.sequence_no),
        )

    def lookup_document(
        self,
        ledger_name: str,
        table_name: str,
        key_attribute: str,
        key_value: str,
    ) -> DocumentLocator:
        self._check_ledger(ledger_name)
        for block in reversed(self._blocks):
            data = block.revision.data
            if block.table_name != table_name or not isinstance(data, dict):
                continue
            if key_attribute in data and str(data[key_attribute]) == key_value:
                return DocumentLocator(
                    document_id=block.revision.metadata.id,
                    block_address=block.revision.block_address,
                )
        raise DocumentNotFoundException(
            f"No document in {table_name} with {key_attribute} = {key_value}",
            details={"table": table_name, "attribute": key_attribute, "value": key_value},
        )

    def find_revision(
        self,
        ledger_name: str,
        table_name: str,
        document_id: str,
        transaction_id: str,
    ) -> DocumentLocator:
        self._check_ledger(ledger_name)
        for block in self._blocks:
            metadata = block.revision.metadata
            if (
                block.table_name == table_name
                and metadata.id == document_id
                and metadata.tx_id == transaction_id
            ):
                return DocumentLocator(
                    document_id=document_id,
                    block_address=block.revision.block_address,
                )
        raise DocumentNotFoundException(
            f"No revision of {document_id} in {table_name} committed by {transaction_id}",
            details={"table": table_name, "documentId": document_id, "txId": transaction_id},
        )

    def close(self) -> None:
        self.closed = True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_ledger(self, ledger_name: str) -> None:
        if ledger_name != self.ledger_name:
            raise LedgerClientException(
                f"Unknown ledger: {ledger_name!r}",
                details={"ledger": ledger_name},
                retryable=False,
            )

    def _block_at(self, address: BlockAddress) -> _Block:
        if address.strand_id != self.strand_id or address.sequence_no >= len(self._blocks):
            raise DocumentNotFoundException(
                f"No block at {address}",
                details={"blockAddress": address.model_dump(by_alias=True)},
            )
        return self._blocks[address.sequence_no]

    def _block_hashes(self, tip: BlockAddress) -> list[bytes]:
        return [block.block_hash for block in self._blocks[: tip.sequence_no + 1]]

    def _covering_leaves(
        self,
        block_address: BlockAddress,
        digest_tip_address: BlockAddress,
    ) -> list[bytes]:
        self._block_at(digest_tip_address)
        if digest_tip_address.sequence_no < block_address.sequence_no:
            raise LedgerClientException(
                f"Digest tip {digest_tip_address} precedes block {block_address}",
                retryable=False,
            )
        return self._block_hashes(digest_tip_address)


__all__ = ["InMemoryLedger", "DEFAULT_STRAND_ID"]
