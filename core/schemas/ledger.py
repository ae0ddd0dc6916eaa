"""
Schemas & Canonicalization
File: ledger.py

Purpose: Data model for ledger positions, digests, revisions and the portable
verification bundle (RevisionMetadata).

Hashes are raw ``bytes`` inside the models and standard Base64 strings on the
wire. Models serialize with camelCase aliases, matching the ledger's field
names; snake_case names are accepted on input as well.
"""

import base64
import binascii
from datetime import datetime
from typing import Annotated, Any

from amazon.ion.core import IonType
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    field_serializer,
    model_validator,
)

from .errors import ProofFormatException
from .ion import (
    dump_ion_text,
    ion_timestamp,
    ion_to_json,
    ion_type_of,
    parse_ion_blob_list,
    parse_ion_struct,
)


def _b64decode(text: str) -> bytes:
    try:
        return base64.b64decode("".join(text.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ProofFormatException(
            f"Invalid Base64 value: {e}",
            details={"value": text[:64]},
        ) from e


def _decode_hash(value: Any) -> Any:
    if isinstance(value, str):
        return _b64decode(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return value


def _encode_hash(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


def _decode_proof(value: Any) -> Any:
    if isinstance(value, str):
        return parse_ion_blob_list(value)
    if isinstance(value, dict) and "IonText" in value:
        return parse_ion_blob_list(value["IonText"])
    return value


def _ion_input(data: Any) -> Any:
    """Unwrap IonText holders, Ion text and loaded Ion structs into dicts."""
    if isinstance(data, dict) and set(data) == {"IonText"}:
        data = data["IonText"]
    if isinstance(data, str):
        return parse_ion_struct(data)
    if ion_type_of(data) is IonType.STRUCT:
        return dict(data)
    return data


# 32-byte hash carried as Base64 text on the wire
HashBytes = Annotated[
    bytes,
    BeforeValidator(_decode_hash),
    PlainSerializer(_encode_hash, return_type=str, when_used="json"),
]

# Ordered sibling hashes, leaf first
ProofHashes = Annotated[list[HashBytes], BeforeValidator(_decode_proof)]


class BlockAddress(BaseModel):
    """
    Position of a block in the ledger's hash chain.

    Two addresses are equal iff strand and sequence number both match.
    Accepts the ledger's Ion text form on input:
    ``{strandId: "JdxjkR9bSYB5jMHWcI464T", sequenceNo: 42}``
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    strand_id: str = Field(
        ...,
        alias="strandId",
        min_length=1,
        description="Identifier of the journal strand",
    )
    sequence_no: int = Field(
        ...,
        alias="sequenceNo",
        ge=0,
        description="Position of the block within the strand",
    )

    @model_validator(mode="before")
    @classmethod
    def _accept_ion(cls, data: Any) -> Any:
        if isinstance(data, dict) and set(data) == {"IonText"}:
            data = data["IonText"]
        if isinstance(data, str):
            return cls.ion_fields(parse_ion_struct(data))
        if ion_type_of(data) is IonType.STRUCT:
            return cls.ion_fields(data)
        return data

    @staticmethod
    def ion_fields(struct: Any) -> dict[str, Any]:
        """Read strandId and sequenceNo from a loaded Ion struct."""
        strand = struct.get("strandId")
        sequence = struct.get("sequenceNo")
        if (
            ion_type_of(strand) not in (IonType.STRING, IonType.SYMBOL)
            or ion_type_of(sequence) is not IonType.INT
        ):
            raise ProofFormatException(
                "Block address must contain a strandId string and a sequenceNo int",
                details={"strandId": repr(strand), "sequenceNo": repr(sequence)},
            )
        if ion_type_of(strand) is IonType.SYMBOL:
            strand = strand.text
        return {"strandId": str(strand), "sequenceNo": int(sequence)}

    @classmethod
    def from_ion_text(cls, text: str) -> "BlockAddress":
        return cls.model_validate(text)

    def to_ion_text(self) -> str:
        return dump_ion_text({"strandId": self.strand_id, "sequenceNo": self.sequence_no})

    def __str__(self) -> str:
        return self.to_ion_text()


class LedgerDigest(BaseModel):
    """Published root of trust as of a particular chain position."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    digest: HashBytes = Field(
        ...,
        description="SHA-256 digest covering the journal up to the tip",
    )
    digest_tip_address: BlockAddress = Field(
        ...,
        alias="digestTipAddress",
        description="Last block covered by the digest",
    )


class RevisionMetadataFields(BaseModel):
    """Ledger-assigned metadata of a single document revision."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Document id")
    version: int = Field(..., ge=0, description="Revision counter, starting at 0")
    tx_time: datetime = Field(..., alias="txTime", description="Commit timestamp")
    tx_id: str = Field(..., alias="txId", min_length=1, description="Committing transaction id")

    @model_validator(mode="before")
    @classmethod
    def _accept_ion(cls, data: Any) -> Any:
        return _ion_input(data)


class Revision(BaseModel):
    """
    A committed document revision as returned by the ledger.

    Accepts the ledger's Ion text (or an ``{"IonText": ...}`` holder). Data
    loaded from Ion keeps its Ion types so its hash can be recomputed
    exactly; the JSON form renders it as plain JSON values.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    block_address: BlockAddress = Field(..., alias="blockAddress")
    hash: HashBytes = Field(..., description="Ledger-computed revision hash")
    data: Any = Field(default=None, description="User document content")
    metadata: RevisionMetadataFields

    @model_validator(mode="before")
    @classmethod
    def _accept_ion(cls, data: Any) -> Any:
        return _ion_input(data)

    @field_serializer("data", when_used="json")
    def _serialize_data(self, data: Any) -> Any:
        return ion_to_json(data)

    def to_ion_text(self) -> str:
        """Ion text of the revision. Data keeps its Ion types."""
        return dump_ion_text({
            "blockAddress": self.block_address.model_dump(by_alias=True),
            "hash": self.hash,
            "data": self.data,
            "metadata": {
                "id": self.metadata.id,
                "version": self.metadata.version,
                "txTime": ion_timestamp(self.metadata.tx_time),
                "txId": self.metadata.tx_id,
            },
        })


class RevisionWithProof(BaseModel):
    """Revision plus the proof linking its hash to a digest tip."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    revision: Revision
    proof: ProofHashes = Field(default_factory=list)


class BlockWithProof(BaseModel):
    """Journal block hash plus the proof linking it to a digest tip."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    block_address: BlockAddress = Field(..., alias="blockAddress")
    block_hash: HashBytes = Field(..., alias="blockHash")
    proof: ProofHashes = Field(default_factory=list)


class DocumentLocator(BaseModel):
    """Latest committed position of the document matching a key."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    document_id: str = Field(..., alias="documentId", min_length=1)
    block_address: BlockAddress = Field(..., alias="blockAddress")


class RevisionMetadata(BaseModel):
    """
    Portable verification bundle for one document revision.

    Captured from the ledger at a point in time and immutable afterwards.
    A caller can persist it outside the ledger and present it later; the
    verifier re-fetches the revision and proof but never re-trusts anything
    but the digest carried here.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    ledger_name: str = Field(..., alias="ledgerName", min_length=1)
    table_name: str = Field(..., alias="tableName", min_length=1)
    block_address: BlockAddress = Field(..., alias="blockAddress")
    document_id: str = Field(..., alias="documentId", min_length=1)
    revision_hash: HashBytes = Field(..., alias="revisionHash")
    proof: ProofHashes = Field(default_factory=list)
    ledger_digest: LedgerDigest = Field(..., alias="ledgerDigest")

    def to_json_dict(self) -> dict[str, Any]:
        """Wire form: camelCase keys, Base64 hashes."""
        return self.model_dump(mode="json", by_alias=True)
