"""
Test fixtures package for ledgerproof tests.

This package provides factory functions for creating test objects:
- ledger_fixtures.py: known-answer hashes, InMemoryLedger content, stub client

Usage:
    from fixtures.ledger_fixtures import make_ledger, make_revision_metadata

    def test_something():
        ledger = make_ledger()
        metadata = make_revision_metadata(ledger)
"""

from .ledger_fixtures import (
    EXPECTED_DIGEST_HEX,
    LEAF_HASH,
    ONES_HASH,
    TWOS_HASH,
    StubLedgerClient,
    make_block_address,
    make_ledger,
    make_revision_metadata,
    make_vehicle,
    replace_revision,
    seeded_rng,
)

__all__ = [
    "EXPECTED_DIGEST_HEX",
    "LEAF_HASH",
    "ONES_HASH",
    "TWOS_HASH",
    "StubLedgerClient",
    "make_block_address",
    "make_ledger",
    "make_revision_metadata",
    "make_vehicle",
    "replace_revision",
    "seeded_rng",
]
