"""
Minimal API (FastAPI)

HTTP API for ledgerproof:
- POST /recompute - Recompute a digest from a leaf hash and proof
- POST /revision-hash - Check a revision hash against its content
- POST /verify - Verify a RevisionMetadata bundle
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
