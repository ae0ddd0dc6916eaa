"""
Ledger test fixtures.

Provides:
- Known-answer hashes for the pairwise fold
- Factories for vehicle registration documents committed to an InMemoryLedger
- RevisionMetadata bundles captured from that ledger
- StubLedgerClient, a LedgerClient returning canned answers
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from core.crypto.hashing import sha256
from core.ledger import InMemoryLedger, LedgerMetadataFetcher
from core.schemas.ledger import (
    BlockAddress,
    BlockWithProof,
    DocumentLocator,
    LedgerDigest,
    Revision,
    RevisionMetadata,
    RevisionWithProof,
)


# =============================================================================
# Known-answer hashes
# =============================================================================

LEAF_HASH = sha256(b"leaf")
ONES_HASH = b"\x01" * 32
TWOS_HASH = b"\x02" * 32

# sha256(ONES_HASH + LEAF_HASH): last byte 0x0b of LEAF_HASH orders after 0x01
FIRST_STEP_HEX = "edb82eb77c24b24bedb2f98a11f39d41c9e2c6147ac8ff51e02c6725d212d421"

# recompute_digest(LEAF_HASH, [ONES_HASH, TWOS_HASH])
EXPECTED_DIGEST_HEX = "82706c04b2b82b9915c2eb30459d1a56f5918c2ee679517a6d9a2c5003f2c2b7"
EXPECTED_DIGEST_B64 = "gnBsBLK4K5kVwuswRZ0aVvWRjC7meVF6bZosUAPywrc="

LEAF_HASH_B64 = "n5EWH0NDPkmm3m22gNefYBWfLkrJFyYhoShGQoFYRAs="
ONES_HASH_B64 = "AQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQE="
TWOS_HASH_B64 = "AgICAgICAgICAgICAgICAgICAgICAgICAgICAgICAgI="


# =============================================================================
# Ledger content
# =============================================================================

LEDGER_NAME = "vehicle-registration"
TABLE_NAME = "VehicleRegistration"
KEY_ATTRIBUTE = "VIN"

BASE_TX_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

VINS = [
    "1N4AL11D75C109151",
    "KM8SRDHF6EU074761",
    "3HGGK5G53FM761765",
    "1HVBBAANXWH544237",
    "1C4RJFAG0FC625797",
]


def make_vehicle(
    vin: str = VINS[0],
    owner: str = "Raul Lewis",
    city: str = "Everett",
    year: int = 2011,
    **extra: Any,
) -> dict[str, Any]:
    """Create a vehicle registration document."""
    document = {
        "VIN": vin,
        "LicensePlateNumber": f"LP{vin[-5:]}",
        "State": "WA",
        "City": city,
        "PendingPenaltyTicketAmount": 90.25,
        "ValidFromDate": "2017-08-21",
        "ValidToDate": "2020-05-11",
        "Owner": owner,
        "Year": year,
    }
    document.update(extra)
    return document


def make_ledger(
    vehicle_count: int = 5,
    ledger_name: str = LEDGER_NAME,
) -> InMemoryLedger:
    """
    Create an InMemoryLedger with one committed registration per VIN.

    Commit times are spaced one minute apart from BASE_TX_TIME.
    """
    ledger = InMemoryLedger(ledger_name)
    for i, vin in enumerate(VINS[:vehicle_count]):
        ledger.commit(
            TABLE_NAME,
            make_vehicle(vin),
            key_attribute=KEY_ATTRIBUTE,
            tx_time=BASE_TX_TIME + timedelta(minutes=i),
        )
    return ledger


def make_revision_metadata(
    ledger: Optional[InMemoryLedger] = None,
    vin: str = VINS[0],
) -> RevisionMetadata:
    """Capture the bundle for the latest revision of a VIN."""
    ledger = ledger or make_ledger()
    fetcher = LedgerMetadataFetcher(ledger, sleep=lambda _s: None)
    return fetcher.get_revision_metadata_for_key(
        ledger.ledger_name, TABLE_NAME, KEY_ATTRIBUTE, vin
    )


def seeded_rng(seed: int = 1234) -> random.Random:
    """Deterministic random source for bit-flip tests."""
    return random.Random(seed)


# =============================================================================
# Stub client
# =============================================================================

class StubLedgerClient:
    """
    LedgerClient returning canned answers and recording calls.

    Unset answers raise AssertionError when requested.
    """

    def __init__(
        self,
        *,
        revision: Optional[RevisionWithProof] = None,
        digests: Optional[list[LedgerDigest]] = None,
        block: Optional[BlockWithProof] = None,
        locator: Optional[DocumentLocator] = None,
    ) -> None:
        self.revision = revision
        self.digests = list(digests or [])
        self.block = block
        self.locator = locator
        self.calls: list[tuple[str, tuple]] = []
        self.closed = False

    def fetch_digest(self, ledger_name: str) -> LedgerDigest:
        self.calls.append(("fetch_digest", (ledger_name,)))
        assert self.digests, "no digest configured"
        if len(self.digests) > 1:
            return self.digests.pop(0)
        return self.digests[0]

    def fetch_revision(self, ledger_name, document_id, block_address, digest_tip_address):
        self.calls.append(
            ("fetch_revision", (ledger_name, document_id, block_address, digest_tip_address))
        )
        assert self.revision is not None, "no revision configured"
        return self.revision

    def fetch_block(self, ledger_name, block_address, digest_tip_address):
        self.calls.append(("fetch_block", (ledger_name, block_address, digest_tip_address)))
        assert self.block is not None, "no block configured"
        return self.block

    def lookup_document(self, ledger_name, table_name, key_attribute, key_value):
        self.calls.append(("lookup_document", (ledger_name, table_name, key_attribute, key_value)))
        assert self.locator is not None, "no locator configured"
        return self.locator

    def find_revision(self, ledger_name, table_name, document_id, transaction_id):
        self.calls.append(("find_revision", (ledger_name, table_name, document_id, transaction_id)))
        assert self.locator is not None, "no locator configured"
        return self.locator

    def close(self) -> None:
        self.closed = True

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


def replace_revision(
    fetched: RevisionWithProof,
    **changes: Any,
) -> RevisionWithProof:
    """Copy a fetched revision with some Revision fields replaced."""
    revision: Revision = fetched.revision.model_copy(update=changes)
    return RevisionWithProof(revision=revision, proof=fetched.proof)


def make_block_address(sequence_no: int, strand_id: str = "LedgerProofStrand00001") -> BlockAddress:
    return BlockAddress(strand_id=strand_id, sequence_no=sequence_no)
