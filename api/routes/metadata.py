"""
Metadata Routes

Capture RevisionMetadata bundles from the configured ledger and fetch the
revision a bundle points to.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from pydantic import ValidationError

from api.deps import get_ledger_registry, get_runtime_config
from api.errors import InvalidRequestError
from api.models.requests import MetadataRequest
from api.models.responses import RevisionResponse
from core.config.runtime import RuntimeConfig
from core.ledger import LedgerClientRegistry, LedgerMetadataFetcher
from core.proofs import validate_revision_hash
from core.schemas.ledger import BlockAddress, RevisionMetadata


logger = logging.getLogger(__name__)

router = APIRouter(tags=["metadata"])


def _fetcher(
    registry: LedgerClientRegistry,
    config: RuntimeConfig,
    ledger_name: str,
) -> LedgerMetadataFetcher:
    return LedgerMetadataFetcher(
        registry.get(ledger_name),
        retry_delay_s=config.verifier.digest_retry_delay_s,
    )


@router.post("/metadata")
def capture_metadata(
    request: MetadataRequest,
    registry: LedgerClientRegistry = Depends(get_ledger_registry),
    config: RuntimeConfig = Depends(get_runtime_config),
) -> dict[str, Any]:
    """
    Capture the verification bundle for a document revision.

    The revision is selected by document id and block address, by document
    id and the transaction that wrote it, or by the latest revision whose
    key attribute matches. The response is the RevisionMetadata JSON that
    POST /verify accepts.
    """
    fetcher = _fetcher(registry, config, request.ledger_name)
    if request.key_attribute is not None:
        metadata = fetcher.get_revision_metadata_for_key(
            request.ledger_name,
            request.table_name,
            request.key_attribute,
            request.key_value,
        )
    elif request.transaction_id is not None:
        metadata = fetcher.get_revision_metadata_for_transaction(
            request.ledger_name,
            request.table_name,
            request.document_id,
            request.transaction_id,
        )
    else:
        metadata = fetcher.get_revision_metadata(
            request.ledger_name,
            request.table_name,
            request.document_id,
            BlockAddress(strand_id=request.strand_id, sequence_no=request.sequence_no),
        )
    logger.info("Captured metadata for %s in %s", metadata.document_id, metadata.ledger_name)
    return metadata.to_json_dict()


@router.post("/revision", response_model=RevisionResponse)
def fetch_revision(
    body: dict[str, Any] = Body(..., description="RevisionMetadata JSON"),
    validate_content: bool = Query(
        default=False,
        description="Recompute the revision hash from the fetched content",
    ),
    registry: LedgerClientRegistry = Depends(get_ledger_registry),
    config: RuntimeConfig = Depends(get_runtime_config),
) -> RevisionResponse:
    """Fetch the revision, content included, that a captured bundle points to."""
    try:
        metadata = RevisionMetadata.model_validate(body)
    except ValidationError as e:
        raise InvalidRequestError(
            "Invalid revision metadata",
            details={"errors": e.errors(include_url=False, include_context=False)},
        )

    revision = _fetcher(registry, config, metadata.ledger_name).get_revision_for_metadata(metadata)
    return RevisionResponse(
        ok=True,
        revision=revision.model_dump(mode="json", by_alias=True),
        valid=validate_revision_hash(revision) if validate_content else None,
    )
