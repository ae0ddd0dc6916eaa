"""
CLI command modules.
"""

from ledgerproof_cli.commands import block, metadata, recompute, revision, revision_hash, verify

__all__ = ["block", "metadata", "recompute", "revision", "revision_hash", "verify"]
