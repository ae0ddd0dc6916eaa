"""
Metadata Fetcher Unit Tests
Tests for core/ledger/metadata.py

Tests:
1. Bundles captured by key, by id and by transaction
2. Stale digest is re-fetched exactly once after the configured delay
3. A current digest is used without waiting
4. The revision behind a bundle is fetched with its content
"""
import pytest

from core.ledger import DEFAULT_DIGEST_RETRY_DELAY_S, InMemoryLedger, LedgerMetadataFetcher
from core.proofs import validate_revision_hash
from core.schemas.errors import DocumentNotFoundException, LedgerClientException
from core.schemas.ledger import LedgerDigest

from fixtures.ledger_fixtures import (
    KEY_ATTRIBUTE,
    LEDGER_NAME,
    TABLE_NAME,
    VINS,
    StubLedgerClient,
    make_block_address,
    make_vehicle,
)


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleep():
    return RecordingSleep()


class TestCapture:
    """Tests for bundle capture."""

    def test_by_key(self, ledger, sleep):
        fetcher = LedgerMetadataFetcher(ledger, sleep=sleep)
        bundle = fetcher.get_revision_metadata_for_key(LEDGER_NAME, TABLE_NAME, KEY_ATTRIBUTE, VINS[2])
        assert bundle.ledger_name == LEDGER_NAME
        assert bundle.table_name == TABLE_NAME
        assert bundle.block_address == make_block_address(2, ledger.strand_id)
        assert bundle.ledger_digest == ledger.fetch_digest(LEDGER_NAME)
        assert sleep.calls == []

    def test_by_id(self, ledger, sleep):
        revision = ledger.commit(TABLE_NAME, make_vehicle("JTDKN3DU0A0123456"), key_attribute=KEY_ATTRIBUTE)
        fetcher = LedgerMetadataFetcher(ledger, sleep=sleep)
        bundle = fetcher.get_revision_metadata(
            LEDGER_NAME, TABLE_NAME, revision.metadata.id, revision.block_address
        )
        assert bundle.document_id == revision.metadata.id
        assert bundle.revision_hash == revision.hash
        assert bundle.proof[0] != revision.hash

    def test_explicit_digest_is_not_fetched(self, ledger, sleep):
        digest = ledger.fetch_digest(LEDGER_NAME)
        locator = ledger.lookup_document(LEDGER_NAME, TABLE_NAME, KEY_ATTRIBUTE, VINS[0])
        stub = StubLedgerClient(
            revision=ledger.fetch_revision(
                LEDGER_NAME, locator.document_id, locator.block_address, digest.digest_tip_address
            ),
            locator=locator,
        )
        bundle = LedgerMetadataFetcher(stub, sleep=sleep).get_revision_metadata_for_key(
            LEDGER_NAME, TABLE_NAME, KEY_ATTRIBUTE, VINS[0], ledger_digest=digest
        )
        assert stub.call_names() == ["lookup_document", "fetch_revision"]
        assert bundle.ledger_digest == digest

    def test_unknown_key(self, ledger, sleep):
        fetcher = LedgerMetadataFetcher(ledger, sleep=sleep)
        with pytest.raises(DocumentNotFoundException):
            fetcher.get_revision_metadata_for_key(LEDGER_NAME, TABLE_NAME, KEY_ATTRIBUTE, "NOPE")


class TestTransactionLookup:
    """Tests for capture by the transaction that wrote a revision."""

    def test_selects_the_transactions_revision(self, ledger, sleep):
        first = ledger.commit(
            TABLE_NAME, make_vehicle(VINS[0], owner="Brent Logan"), key_attribute=KEY_ATTRIBUTE
        )
        second = ledger.commit(
            TABLE_NAME, make_vehicle(VINS[0], owner="Alexis Pena"), key_attribute=KEY_ATTRIBUTE
        )
        assert first.metadata.id == second.metadata.id

        fetcher = LedgerMetadataFetcher(ledger, sleep=sleep)
        bundle = fetcher.get_revision_metadata_for_transaction(
            LEDGER_NAME, TABLE_NAME, first.metadata.id, first.metadata.tx_id
        )
        assert bundle.block_address == first.block_address
        assert bundle.revision_hash == first.hash
        assert bundle.ledger_digest.digest_tip_address == second.block_address

    def test_unknown_transaction(self, ledger, revision_metadata, sleep):
        fetcher = LedgerMetadataFetcher(ledger, sleep=sleep)
        with pytest.raises(DocumentNotFoundException) as excinfo:
            fetcher.get_revision_metadata_for_transaction(
                LEDGER_NAME, TABLE_NAME, revision_metadata.document_id, "not-a-transaction"
            )
        assert excinfo.value.details["txId"] == "not-a-transaction"

    def test_transaction_of_another_table(self, ledger, sleep):
        other = ledger.commit("Person", {"FirstName": "Raul", "GovId": "P626-168-229-765"})
        fetcher = LedgerMetadataFetcher(ledger, sleep=sleep)
        with pytest.raises(DocumentNotFoundException):
            fetcher.get_revision_metadata_for_transaction(
                LEDGER_NAME, TABLE_NAME, other.metadata.id, other.metadata.tx_id
            )

    def test_stub_call_order(self, ledger, sleep):
        digest = ledger.fetch_digest(LEDGER_NAME)
        locator = ledger.lookup_document(LEDGER_NAME, TABLE_NAME, KEY_ATTRIBUTE, VINS[1])
        stub = StubLedgerClient(
            revision=ledger.fetch_revision(
                LEDGER_NAME, locator.document_id, locator.block_address, digest.digest_tip_address
            ),
            digests=[digest],
            locator=locator,
        )
        LedgerMetadataFetcher(stub, sleep=sleep).get_revision_metadata_for_transaction(
            LEDGER_NAME, TABLE_NAME, locator.document_id, "tx-1"
        )
        assert stub.calls[0] == ("find_revision", (LEDGER_NAME, TABLE_NAME, locator.document_id, "tx-1"))
        assert stub.call_names()[1:] == ["fetch_digest", "fetch_revision"]


class TestRevisionForMetadata:
    """Tests for fetching the revision a bundle points to."""

    def test_returns_revision_with_content(self, ledger, revision_metadata, sleep):
        revision = LedgerMetadataFetcher(ledger, sleep=sleep).get_revision_for_metadata(revision_metadata)
        assert revision.hash == revision_metadata.revision_hash
        assert revision.block_address == revision_metadata.block_address
        assert revision.metadata.id == revision_metadata.document_id
        assert revision.data["VIN"] == VINS[0]
        assert validate_revision_hash(revision)

    def test_uses_bundle_digest_tip(self, ledger, revision_metadata, sleep):
        stub = StubLedgerClient(
            revision=ledger.fetch_revision(
                LEDGER_NAME,
                revision_metadata.document_id,
                revision_metadata.block_address,
                revision_metadata.ledger_digest.digest_tip_address,
            ),
        )
        LedgerMetadataFetcher(stub, sleep=sleep).get_revision_for_metadata(revision_metadata)
        assert stub.calls == [(
            "fetch_revision",
            (
                LEDGER_NAME,
                revision_metadata.document_id,
                revision_metadata.block_address,
                revision_metadata.ledger_digest.digest_tip_address,
            ),
        )]
        assert sleep.calls == []

    def test_tampered_content_fails_validation(self, ledger, revision_metadata, sleep):
        ledger.tamper_data(revision_metadata.block_address, make_vehicle(owner="Mallory"))
        revision = LedgerMetadataFetcher(ledger, sleep=sleep).get_revision_for_metadata(revision_metadata)
        assert revision.hash == revision_metadata.revision_hash
        assert not validate_revision_hash(revision)


class TestStaleDigest:
    """Tests for the single digest retry."""

    def test_default_delay(self):
        assert DEFAULT_DIGEST_RETRY_DELAY_S == 0.1
        assert LedgerMetadataFetcher(InMemoryLedger()).retry_delay_s == 0.1

    def test_retries_once_when_behind(self, sleep):
        ledger = InMemoryLedger(LEDGER_NAME)
        ledger.commit(TABLE_NAME, make_vehicle(VINS[0]), key_attribute=KEY_ATTRIBUTE)
        stale = ledger.fetch_digest(LEDGER_NAME)
        ledger.commit(TABLE_NAME, make_vehicle(VINS[1]), key_attribute=KEY_ATTRIBUTE)
        current = ledger.fetch_digest(LEDGER_NAME)

        stub = StubLedgerClient(digests=[stale, current])
        fetcher = LedgerMetadataFetcher(stub, retry_delay_s=0.25, sleep=sleep)
        digest = fetcher.get_digest_covering(LEDGER_NAME, make_block_address(1, ledger.strand_id))

        assert digest == current
        assert sleep.calls == [0.25]
        assert stub.call_names() == ["fetch_digest", "fetch_digest"]

    def test_second_answer_used_as_is(self, sleep):
        ledger = InMemoryLedger(LEDGER_NAME)
        ledger.commit(TABLE_NAME, make_vehicle(VINS[0]), key_attribute=KEY_ATTRIBUTE)
        stale = ledger.fetch_digest(LEDGER_NAME)

        stub = StubLedgerClient(digests=[stale, stale, stale])
        fetcher = LedgerMetadataFetcher(stub, sleep=sleep)
        digest = fetcher.get_digest_covering(LEDGER_NAME, make_block_address(3, ledger.strand_id))

        assert digest == stale
        assert len(sleep.calls) == 1
        assert stub.call_names().count("fetch_digest") == 2

    def test_no_retry_when_current(self, ledger, sleep):
        stub = StubLedgerClient(digests=[ledger.fetch_digest(LEDGER_NAME)])
        LedgerMetadataFetcher(stub, sleep=sleep).get_digest_covering(
            LEDGER_NAME, make_block_address(4, ledger.strand_id)
        )
        assert sleep.calls == []
        assert stub.call_names() == ["fetch_digest"]

    def test_lagging_ledger_capture_raises_ledger_error(self, sleep):
        """A digest that still trails after the retry cannot prove the block."""
        ledger = InMemoryLedger(LEDGER_NAME, digest_lag=1)
        ledger.commit(TABLE_NAME, make_vehicle(VINS[0]), key_attribute=KEY_ATTRIBUTE)
        ledger.commit(TABLE_NAME, make_vehicle(VINS[1]), key_attribute=KEY_ATTRIBUTE)
        fetcher = LedgerMetadataFetcher(ledger, sleep=sleep)
        with pytest.raises(LedgerClientException):
            fetcher.get_revision_metadata_for_key(LEDGER_NAME, TABLE_NAME, KEY_ATTRIBUTE, VINS[1])
        assert len(sleep.calls) == 1

    def test_lag_catches_up_between_fetches(self, sleep):
        ledger = InMemoryLedger(LEDGER_NAME, digest_lag=1)
        ledger.commit(TABLE_NAME, make_vehicle(VINS[0]), key_attribute=KEY_ATTRIBUTE)
        ledger.commit(TABLE_NAME, make_vehicle(VINS[1]), key_attribute=KEY_ATTRIBUTE)

        def publish(seconds):
            sleep(seconds)
            ledger.digest_lag = 0

        fetcher = LedgerMetadataFetcher(ledger, sleep=publish)
        bundle = fetcher.get_revision_metadata_for_key(LEDGER_NAME, TABLE_NAME, KEY_ATTRIBUTE, VINS[1])
        assert bundle.ledger_digest.digest_tip_address.sequence_no == 1
        assert sleep.calls == [DEFAULT_DIGEST_RETRY_DELAY_S]
        assert isinstance(bundle.ledger_digest, LedgerDigest)
