"""
API Request Models

Pydantic models for API request validation.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class RecomputeRequest(BaseModel):
    """Request body for POST /recompute endpoint."""

    leaf: str = Field(
        ...,
        min_length=1,
        description="Base64 revision or block hash",
    )
    proof: list[str] | None = Field(
        default=None,
        description="Base64 sibling hashes, leaf first",
    )
    proof_ion: str | None = Field(
        default=None,
        description="Proof as the ledger's Ion text, e.g. [{{...}},{{...}}]",
    )
    digest: str | None = Field(
        default=None,
        description="Base64 ledger digest to compare against",
    )

    @model_validator(mode="after")
    def _one_proof_form(self) -> "RecomputeRequest":
        if self.proof is not None and self.proof_ion is not None:
            raise ValueError("Provide either proof or proof_ion, not both")
        return self


class RevisionHashRequest(BaseModel):
    """Request body for POST /revision-hash endpoint."""

    revision: dict[str, Any] = Field(
        ...,
        description="Revision as returned by the ledger (blockAddress, hash, data, metadata)",
    )


class VerifyOptions(BaseModel):
    """Query parameters for POST /verify endpoint."""

    validate_content: bool | None = Field(
        default=None,
        description="Recompute the revision hash from content (config default when omitted)",
    )
    self_check: bool | None = Field(
        default=None,
        description="Run the bit-flip self-check after a successful verification",
    )


class MetadataRequest(BaseModel):
    """Request body for POST /metadata endpoint."""

    ledger_name: str = Field(..., min_length=1)
    table_name: str = Field(..., min_length=1)
    document_id: str | None = Field(default=None, description="Ledger-assigned document id")
    strand_id: str | None = Field(default=None, description="Block strand (with sequence_no)")
    sequence_no: int | None = Field(default=None, ge=0, description="Block sequence number")
    transaction_id: str | None = Field(
        default=None,
        description="Transaction that wrote the revision (with document_id)",
    )
    key_attribute: str | None = Field(default=None, description="Lookup attribute (with key_value)")
    key_value: str | None = Field(default=None, description="Lookup value")

    @model_validator(mode="after")
    def _one_selection(self) -> "MetadataRequest":
        by_key = self.key_attribute is not None or self.key_value is not None
        by_address = self.strand_id is not None or self.sequence_no is not None
        by_transaction = self.transaction_id is not None
        if by_key:
            if self.key_attribute is None or self.key_value is None:
                raise ValueError("key_attribute and key_value go together")
            if self.document_id is not None or by_address or by_transaction:
                raise ValueError("Select the revision by key or by document_id, not both")
            return self
        if self.document_id is None:
            raise ValueError("Provide document_id or key_attribute with key_value")
        if by_address and by_transaction:
            raise ValueError("transaction_id replaces strand_id/sequence_no")
        if by_address and (self.strand_id is None or self.sequence_no is None):
            raise ValueError("strand_id and sequence_no go together")
        if not by_address and not by_transaction:
            raise ValueError("document_id needs strand_id and sequence_no, or transaction_id")
        return self
