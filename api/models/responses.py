"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "ledgerproof-api"
    version: str = "v1"


class RecomputeResponse(BaseModel):
    """Response for POST /recompute endpoint."""

    ok: bool = Field(..., description="Whether the request was processed")
    digest: str = Field(..., description="Base64 candidate digest")
    steps: list[str] = Field(
        default_factory=list,
        description="Base64 intermediate accumulators, one per proof element",
    )
    verified: bool | None = Field(
        default=None,
        description="Candidate equals the supplied digest (when one was supplied)",
    )


class RevisionHashResponse(BaseModel):
    """Response for POST /revision-hash endpoint."""

    ok: bool = Field(..., description="Whether the request was processed")
    valid: bool = Field(..., description="Content hashes to the revision's hash field")
    expected: str = Field(..., description="Base64 hash carried by the revision")
    computed: str = Field(..., description="Base64 hash recomputed from content")


class VerifyResponse(BaseModel):
    """Response for POST /verify endpoint."""

    ok: bool = Field(..., description="Whether the request was processed")
    verified: bool = Field(..., description="Proof reproduces the captured digest")
    ledger_name: str
    document_id: str
    block_address: dict[str, Any]
    digest: str = Field(..., description="Base64 digest the bundle was checked against")
    self_check: bool = Field(default=False, description="Bit-flip self-check was run")


class ErrorDetail(BaseModel):
    """Error details."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail


class RevisionResponse(BaseModel):
    """Response for POST /revision endpoint."""

    ok: bool = Field(..., description="Whether the request was processed")
    revision: dict[str, Any] = Field(..., description="Revision as returned by the ledger")
    valid: bool | None = Field(
        default=None,
        description="Content hashes to the revision hash (when validation was requested)",
    )
