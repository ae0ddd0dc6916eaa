"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import close_ledger_registry
from api.errors import (
    APIError,
    api_error_handler,
    generic_error_handler,
    ledger_proof_error_handler,
)
from api.routes import health, metadata, recompute, revision_hash, verify
from core.schemas.errors import LedgerProofException


# Configure logging; respects LEDGERPROOF_LOG_LEVEL env var and ledgerproof.json logging.level
def _resolve_log_level() -> int:
    """Resolve log level from env var or ledgerproof.json, defaulting to INFO."""
    raw = os.getenv("LEDGERPROOF_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "ledgerproof.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    raw = (json.load(f).get("logging") or {}).get("level")
            except (OSError, ValueError, AttributeError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    close_ledger_registry()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="ledgerproof API",
        description="""
HTTP API for verifying ledger document revisions against published digests.

## Endpoints

- **POST /recompute** - Fold a proof over a leaf hash (offline)
- **POST /revision-hash** - Recompute a revision hash from its content (offline)
- **POST /metadata** - Capture a RevisionMetadata bundle from the ledger
- **POST /revision** - Fetch the revision a bundle points to
- **POST /verify** - Verify a captured RevisionMetadata bundle against the ledger
- **GET /health** - Health check

## Error Statuses

- `409` - The ledger disagrees with the bundle (revisionHash, documentId, blockAddress)
- `400` - Undecodable proof, hash or revision
- `404` - Document or block not found on the ledger
- `502` - The ledger could not be reached or answered badly
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=_lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(LedgerProofException, ledger_proof_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(metadata.router)
    app.include_router(recompute.router)
    app.include_router(revision_hash.router)
    app.include_router(verify.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
