"""
Ledger Client Interface

Defines the collaborator protocol the verifier and the metadata fetcher use
to read digests, revisions and blocks from a ledger.
"""

from typing import Protocol, runtime_checkable

from core.schemas.ledger import (
    BlockAddress,
    BlockWithProof,
    DocumentLocator,
    LedgerDigest,
    RevisionWithProof,
)


@runtime_checkable
class LedgerClient(Protocol):
    """
    Protocol defining the ledger read interface.

    Implementations raise LedgerClientException on transport failures or
    malformed responses and DocumentNotFoundException when a lookup has no
    committed match.
    """

    def fetch_digest(self, ledger_name: str) -> LedgerDigest:
        """Fetch the current digest and the block address it covers."""
        ...

    def fetch_revision(
        self,
        ledger_name: str,
        document_id: str,
        block_address: BlockAddress,
        digest_tip_address: BlockAddress,
    ) -> RevisionWithProof:
        """
        Fetch a revision and the proof linking it to the given digest tip.

        Args:
            ledger_name: Ledger to read from
            document_id: Id of the document whose revision is requested
            block_address: Block the revision was committed in
            digest_tip_address: Tip of the digest the proof must lead to

        Returns:
            RevisionWithProof
        """
        ...

    def fetch_block(
        self,
        ledger_name: str,
        block_address: BlockAddress,
        digest_tip_address: BlockAddress,
    ) -> BlockWithProof:
        """Fetch a journal block hash and its proof to the digest tip."""
        ...

    def lookup_document(
        self,
        ledger_name: str,
        table_name: str,
        key_attribute: str,
        key_value: str,
    ) -> DocumentLocator:
        """Find the latest committed revision of the document matching a key."""
        ...

    def find_revision(
        self,
        ledger_name: str,
        table_name: str,
        document_id: str,
        transaction_id: str,
    ) -> DocumentLocator:
        """Find the revision of a document committed by a given transaction."""
        ...

    def close(self) -> None:
        """Release any resources held by the client."""
        ...


__all__ = ["LedgerClient"]
