"""
Revision Hash Unit Tests
Tests for core/proofs/revision_hash.py

Known answers below were derived independently from the Ion Hash
serialization rules (field digests sorted, scalars as B||TQ||repr||E)
with SHA-256, not from this code.
"""
from datetime import datetime, timedelta, timezone

import pytest

from core.crypto.hashing import compare_hashes, from_base64, join_hashes_pairwise, sha256
from core.proofs.revision_hash import (
    canonicalize_revision,
    compute_revision_hash,
    metadata_ion_value,
    revision_part_hashes,
    validate_revision_hash,
)
from core.schemas.errors import CanonicalizationException
from core.schemas.ion import format_ion_timestamp, ion_hash
from core.schemas.ledger import BlockAddress, Revision, RevisionMetadataFields

from fixtures.ledger_fixtures import BASE_TX_TIME, make_vehicle


# {VIN: "1N4AL11D75C109151", Owner: "Raul Lewis", Year: 2011}
KNOWN_DATA = {"VIN": "1N4AL11D75C109151", "Owner": "Raul Lewis", "Year": 2011}
KNOWN_DATA_HASH_HEX = "5b0884f9a00aad20523bade39a08768ab0ce8fa93d17c3569e1799048b2d7ab1"

# {id: "3Qv67yjXEwB9SjmvkuG6Cp", version: 0, txTime: 2019-06-05T20:53:21.919Z,
#  txId: "HgXAkLjAtV0HQ4lNYdzX60"}
KNOWN_METADATA = RevisionMetadataFields(
    id="3Qv67yjXEwB9SjmvkuG6Cp",
    version=0,
    tx_time=datetime(2019, 6, 5, 20, 53, 21, 919000, tzinfo=timezone.utc),
    tx_id="HgXAkLjAtV0HQ4lNYdzX60",
)
KNOWN_METADATA_HASH_HEX = "d08dadcaae1a5bcfbf8f212c287a003719547dcf5699d9084473c3d18127c34a"

KNOWN_REVISION_HASH_B64 = "XfTAY070AwbsUfEsPY55aEyF8c84KelUl/gLrAN+uUg="


@pytest.fixture
def metadata():
    return RevisionMetadataFields(id="doc-1", version=0, tx_time=BASE_TX_TIME, tx_id="tx-1")


def _revision(data, metadata, hash_value=None):
    return Revision(
        block_address=BlockAddress(strand_id="strand", sequence_no=0),
        hash=hash_value if hash_value is not None else compute_revision_hash(data, metadata),
        data=data,
        metadata=metadata,
    )


class TestKnownAnswers:
    """Revision hashes that must match the ledger's own computation."""

    def test_data_ion_hash(self):
        assert ion_hash(KNOWN_DATA).hex() == KNOWN_DATA_HASH_HEX

    def test_metadata_ion_hash(self):
        assert ion_hash(metadata_ion_value(KNOWN_METADATA)).hex() == KNOWN_METADATA_HASH_HEX

    def test_revision_hash(self):
        assert compute_revision_hash(KNOWN_DATA, KNOWN_METADATA) == from_base64(KNOWN_REVISION_HASH_B64)

    def test_part_hashes(self):
        data_hash, metadata_hash = revision_part_hashes(KNOWN_DATA, KNOWN_METADATA)
        assert data_hash.hex() == KNOWN_DATA_HASH_HEX
        assert metadata_hash.hex() == KNOWN_METADATA_HASH_HEX

    def test_sub_millisecond_time_is_truncated(self):
        finer = KNOWN_METADATA.model_copy(
            update={"tx_time": KNOWN_METADATA.tx_time + timedelta(microseconds=456)}
        )
        assert compute_revision_hash(KNOWN_DATA, finer) == from_base64(KNOWN_REVISION_HASH_B64)


class TestComputeRevisionHash:
    """Tests for compute_revision_hash()."""

    def test_contract(self, metadata):
        data = make_vehicle()
        expected = join_hashes_pairwise(ion_hash(data), ion_hash(metadata_ion_value(metadata)))
        assert compute_revision_hash(data, metadata) == expected

    def test_key_order_irrelevant(self, metadata):
        data = make_vehicle()
        shuffled = dict(reversed(list(data.items())))
        assert compute_revision_hash(data, metadata) == compute_revision_hash(shuffled, metadata)

    def test_metadata_dict_in_either_case(self, metadata):
        data = make_vehicle()
        camel = {"id": "doc-1", "version": 0, "txTime": BASE_TX_TIME, "txId": "tx-1"}
        snake = {"id": "doc-1", "version": 0, "tx_time": BASE_TX_TIME, "tx_id": "tx-1"}
        reference = compute_revision_hash(data, metadata)
        assert compute_revision_hash(data, camel) == reference
        assert compute_revision_hash(data, snake) == reference

    def test_timezone_normalized(self, metadata):
        shifted = metadata.model_copy(
            update={"tx_time": BASE_TX_TIME.astimezone(timezone(timedelta(hours=-7)))}
        )
        data = make_vehicle()
        assert compute_revision_hash(data, shifted) == compute_revision_hash(data, metadata)

    def test_content_change_changes_hash(self, metadata):
        assert compute_revision_hash(make_vehicle(owner="A"), metadata) != compute_revision_hash(
            make_vehicle(owner="B"), metadata
        )

    def test_value_type_changes_hash(self, metadata):
        assert compute_revision_hash({"Year": 2011}, metadata) != compute_revision_hash(
            {"Year": "2011"}, metadata
        )

    def test_version_change_changes_hash(self, metadata):
        bumped = metadata.model_copy(update={"version": 1})
        data = make_vehicle()
        assert compute_revision_hash(data, bumped) != compute_revision_hash(data, metadata)

    def test_null_data(self, metadata):
        assert len(compute_revision_hash(None, metadata)) == 32

    def test_unsupported_data_raises(self, metadata):
        with pytest.raises(CanonicalizationException):
            compute_revision_hash({"when": object()}, metadata)


class TestMetadataIonValue:
    """Tests for metadata_ion_value()."""

    def test_field_names(self, metadata):
        assert list(metadata_ion_value(metadata)) == ["id", "version", "txTime", "txId"]

    def test_millisecond_timestamp(self):
        value = metadata_ion_value(KNOWN_METADATA)
        assert format_ion_timestamp(value["txTime"]) == "2019-06-05T20:53:21.919Z"


class TestCanonicalizeRevision:
    """Tests for canonicalize_revision()."""

    def test_smaller_part_hash_first(self):
        encoded = canonicalize_revision(KNOWN_DATA, KNOWN_METADATA)
        data_hash = bytes.fromhex(KNOWN_DATA_HASH_HEX)
        metadata_hash = bytes.fromhex(KNOWN_METADATA_HASH_HEX)
        assert compare_hashes(data_hash, metadata_hash) < 0
        assert encoded == data_hash + metadata_hash
        assert sha256(encoded) == from_base64(KNOWN_REVISION_HASH_B64)


class TestValidateRevisionHash:
    """Tests for validate_revision_hash()."""

    def test_honest_revision(self, metadata):
        assert validate_revision_hash(_revision(make_vehicle(), metadata)) is True

    def test_known_revision(self):
        revision = _revision(KNOWN_DATA, KNOWN_METADATA, hash_value=from_base64(KNOWN_REVISION_HASH_B64))
        assert validate_revision_hash(revision) is True

    def test_altered_data(self, metadata):
        honest = _revision(make_vehicle(), metadata)
        altered = honest.model_copy(update={"data": make_vehicle(owner="Mallory")})
        assert validate_revision_hash(altered) is False

    def test_foreign_hash(self, metadata):
        revision = _revision(make_vehicle(), metadata, hash_value=sha256(b"other"))
        assert validate_revision_hash(revision) is False

    def test_ledger_committed_revision(self, ledger):
        fetched = ledger.fetch_revision(
            ledger.ledger_name,
            "unused",
            BlockAddress(strand_id=ledger.strand_id, sequence_no=0),
            ledger.fetch_digest(ledger.ledger_name).digest_tip_address,
        )
        assert validate_revision_hash(fetched.revision) is True
        assert isinstance(fetched.revision.metadata.tx_time, datetime)
