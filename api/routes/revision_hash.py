"""
Revision Hash Route

Check a revision's hash field against its content.
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import ValidationError

from api.errors import InvalidRequestError
from api.models.requests import RevisionHashRequest
from api.models.responses import RevisionHashResponse
from core.crypto.hashing import to_base64
from core.proofs import compute_revision_hash
from core.schemas.ledger import Revision


router = APIRouter(tags=["proofs"])


@router.post("/revision-hash", response_model=RevisionHashResponse)
async def revision_hash(request: RevisionHashRequest) -> RevisionHashResponse:
    """Recompute the revision hash from data and metadata."""
    try:
        revision = Revision.model_validate(request.revision)
    except ValidationError as e:
        raise InvalidRequestError(
            "Invalid revision",
            details={"errors": e.errors(include_url=False, include_context=False)},
        )

    computed = compute_revision_hash(revision.data, revision.metadata)
    return RevisionHashResponse(
        ok=True,
        valid=computed == revision.hash,
        expected=to_base64(revision.hash),
        computed=to_base64(computed),
    )
