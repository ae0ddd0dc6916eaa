"""
Recompute Route

Offline digest recomputation from a leaf hash and a proof.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.models.requests import RecomputeRequest
from api.models.responses import RecomputeResponse
from core.crypto.hashing import from_base64, to_base64
from core.proofs import fold_steps, parse_proof


logger = logging.getLogger(__name__)

router = APIRouter(tags=["proofs"])


@router.post("/recompute", response_model=RecomputeResponse)
async def recompute(request: RecomputeRequest) -> RecomputeResponse:
    """
    Fold a proof over a leaf hash and return the candidate digest.

    When ``digest`` is supplied the response also says whether the candidate
    matches it.
    """
    leaf = from_base64(request.leaf)
    if request.proof_ion is not None:
        proof = parse_proof(request.proof_ion)
    else:
        proof = parse_proof(request.proof or [])

    steps = fold_steps(leaf, proof)
    candidate = steps[-1] if steps else leaf

    verified = None
    if request.digest is not None:
        verified = candidate == from_base64(request.digest)
        logger.info("Recomputed digest %s verified=%s", to_base64(candidate), verified)

    return RecomputeResponse(
        ok=True,
        digest=to_base64(candidate),
        steps=[to_base64(step) for step in steps],
        verified=verified,
    )
