"""API route handlers."""

from api.routes import health, metadata, recompute, revision_hash, verify

__all__ = ["health", "metadata", "recompute", "revision_hash", "verify"]
