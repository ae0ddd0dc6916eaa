"""
Ledger Metadata Capture

Collect a RevisionMetadata bundle for a document revision: the ledger digest,
the revision hash and the proof linking the two. The bundle can be stored
outside the ledger and verified later with MetadataVerifier.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from core.schemas.ledger import (
    BlockAddress,
    LedgerDigest,
    Revision,
    RevisionMetadata,
)

from .client import LedgerClient


logger = logging.getLogger(__name__)

# Wait before re-fetching a digest that does not yet cover the block
DEFAULT_DIGEST_RETRY_DELAY_S = 0.1


class LedgerMetadataFetcher:
    """
    Builds RevisionMetadata bundles from a LedgerClient.

    A freshly committed block may not be covered by the published digest
    yet. When the digest tip's sequence number is behind the block's, the
    fetcher sleeps ``retry_delay_s`` and fetches the digest exactly once
    more; the second answer is used as-is.
    """

    def __init__(
        self,
        client: LedgerClient,
        *,
        retry_delay_s: float = DEFAULT_DIGEST_RETRY_DELAY_S,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.retry_delay_s = retry_delay_s
        self._sleep = sleep

    def get_digest_covering(
        self,
        ledger_name: str,
        block_address: BlockAddress,
    ) -> LedgerDigest:
        """
        Fetch a digest, retrying once if its tip is behind ``block_address``.
        """
        digest = self.client.fetch_digest(ledger_name)
        if digest.digest_tip_address.sequence_no < block_address.sequence_no:
            logger.warning(
                "Digest tip %s is behind block %s; retrying in %.3fs",
                digest.digest_tip_address,
                block_address,
                self.retry_delay_s,
            )
            self._sleep(self.retry_delay_s)
            digest = self.client.fetch_digest(ledger_name)
        return digest

    def get_revision_metadata(
        self,
        ledger_name: str,
        table_name: str,
        document_id: str,
        block_address: BlockAddress,
        ledger_digest: Optional[LedgerDigest] = None,
    ) -> RevisionMetadata:
        """
        Capture the verification bundle for a revision at a known address.

        Args:
            ledger_name: Ledger holding the table
            table_name: Table holding the document
            document_id: Ledger-assigned document id
            block_address: Block the revision was committed in
            ledger_digest: Digest to prove against; fetched when omitted

        Returns:
            RevisionMetadata

        Raises:
            LedgerClientException: If the ledger cannot be read
            DocumentNotFoundException: If the block does not exist
        """
        digest = ledger_digest or self.get_digest_covering(ledger_name, block_address)
        fetched = self.client.fetch_revision(
            ledger_name,
            document_id,
            block_address,
            digest.digest_tip_address,
        )
        logger.info(
            "Captured metadata for %s in %s.%s at %s",
            document_id, ledger_name, table_name, block_address,
        )
        return RevisionMetadata(
            ledger_name=ledger_name,
            table_name=table_name,
            block_address=block_address,
            document_id=document_id,
            revision_hash=fetched.revision.hash,
            proof=fetched.proof,
            ledger_digest=digest,
        )

    def get_revision_metadata_for_key(
        self,
        ledger_name: str,
        table_name: str,
        key_attribute: str,
        key_value: str,
        ledger_digest: Optional[LedgerDigest] = None,
    ) -> RevisionMetadata:
        """
        Capture the bundle for the latest revision of the document whose
        ``key_attribute`` equals ``key_value``.

        Raises:
            DocumentNotFoundException: If no document matches the key
        """
        locator = self.client.lookup_document(
            ledger_name, table_name, key_attribute, key_value
        )
        logger.debug(
            "Key %s=%s resolved to %s at %s",
            key_attribute, key_value, locator.document_id, locator.block_address,
        )
        return self.get_revision_metadata(
            ledger_name,
            table_name,
            locator.document_id,
            locator.block_address,
            ledger_digest=ledger_digest,
        )

    def get_revision_metadata_for_transaction(
        self,
        ledger_name: str,
        table_name: str,
        document_id: str,
        transaction_id: str,
        ledger_digest: Optional[LedgerDigest] = None,
    ) -> RevisionMetadata:
        """
        Capture the bundle for the revision of ``document_id`` written by
        transaction ``transaction_id``.

        Raises:
            DocumentNotFoundException: If that transaction did not write the document
        """
        locator = self.client.find_revision(
            ledger_name, table_name, document_id, transaction_id
        )
        logger.debug(
            "Transaction %s wrote %s at %s",
            transaction_id, document_id, locator.block_address,
        )
        return self.get_revision_metadata(
            ledger_name,
            table_name,
            locator.document_id,
            locator.block_address,
            ledger_digest=ledger_digest,
        )

    def get_revision_for_metadata(self, metadata: RevisionMetadata) -> Revision:
        """
        Fetch the revision a captured bundle points to, content included.

        The revision is requested against the bundle's own digest tip, so the
        call needs no fresh digest.
        """
        fetched = self.client.fetch_revision(
            metadata.ledger_name,
            metadata.document_id,
            metadata.block_address,
            metadata.ledger_digest.digest_tip_address,
        )
        logger.info(
            "Fetched revision %s version %d from %s",
            fetched.revision.metadata.id,
            fetched.revision.metadata.version,
            metadata.ledger_name,
        )
        return fetched.revision


__all__ = ["LedgerMetadataFetcher", "DEFAULT_DIGEST_RETRY_DELAY_S"]
