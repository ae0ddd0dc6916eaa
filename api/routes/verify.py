"""
Verify Route

Verify a captured RevisionMetadata bundle against the configured ledger.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from api.deps import get_ledger_registry, get_runtime_config
from api.errors import InvalidRequestError
from api.models.requests import VerifyOptions
from api.models.responses import VerifyResponse
from core.config.runtime import RuntimeConfig
from core.crypto.hashing import to_base64
from core.ledger import LedgerClientRegistry, MetadataVerifier
from core.schemas.ledger import RevisionMetadata


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.post("/verify", response_model=VerifyResponse)
def verify_metadata(
    body: dict[str, Any] = Body(..., description="RevisionMetadata JSON"),
    options: VerifyOptions = Depends(),
    registry: LedgerClientRegistry = Depends(get_ledger_registry),
    config: RuntimeConfig = Depends(get_runtime_config),
) -> VerifyResponse:
    """
    Re-fetch the revision and proof, reconcile them with the bundle and
    check the proof against the bundle's digest.

    Mismatching identifiers are reported as 409; a proof that does not
    reproduce the digest is a 200 with ``verified: false``.
    """
    try:
        metadata = RevisionMetadata.model_validate(body)
    except ValidationError as e:
        raise InvalidRequestError(
            "Invalid revision metadata",
            details={"errors": e.errors(include_url=False, include_context=False)},
        )

    validate_content = options.validate_content
    if validate_content is None:
        validate_content = config.verifier.validate_content
    self_check = options.self_check
    if self_check is None:
        self_check = config.verifier.self_check

    verifier = MetadataVerifier(
        registry.get(metadata.ledger_name),
        validate_content=validate_content,
    )
    logger.info("Verifying %s in %s", metadata.document_id, metadata.ledger_name)
    verified = verifier.verify(metadata, self_check=self_check)

    return VerifyResponse(
        ok=True,
        verified=verified,
        ledger_name=metadata.ledger_name,
        document_id=metadata.document_id,
        block_address=metadata.block_address.model_dump(by_alias=True),
        digest=to_base64(metadata.ledger_digest.digest),
        self_check=self_check and verified,
    )
