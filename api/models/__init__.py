"""API request and response models."""

from api.models.requests import (
    MetadataRequest,
    RecomputeRequest,
    RevisionHashRequest,
    VerifyOptions,
)
from api.models.responses import (
    HealthResponse,
    RecomputeResponse,
    RevisionHashResponse,
    RevisionResponse,
    VerifyResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "MetadataRequest",
    "RecomputeRequest",
    "RevisionHashRequest",
    "VerifyOptions",
    "HealthResponse",
    "RecomputeResponse",
    "RevisionHashResponse",
    "RevisionResponse",
    "VerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
]
