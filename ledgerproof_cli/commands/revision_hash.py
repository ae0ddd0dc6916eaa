"""
CLI Revision Hash Command

Recompute a revision's hash from its data and metadata.

Usage:
    ledgerproof revision-hash revision.json [--json]
    ledgerproof revision-hash revision.ion [--json]

Files ending in .ion hold the revision as the ledger's Ion text; anything
else is read as JSON.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.crypto.hashing import to_base64
from core.proofs import compute_revision_hash
from core.schemas.ledger import Revision


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def load_revision(path: Path) -> Revision:
    """Load a ledger revision from a JSON or Ion text file."""
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix == ".ion":
            return Revision.model_validate(f.read())
        return Revision.model_validate(json.load(f))


def revision_hash_cmd(args: Namespace) -> int:
    """
    Execute the revision-hash command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    path = Path(args.revision_file)
    if not path.exists():
        print(f"Error: Revision file not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    revision = load_revision(path)
    computed = compute_revision_hash(revision.data, revision.metadata)
    valid = computed == revision.hash

    result = {
        "document_id": revision.metadata.id,
        "version": revision.metadata.version,
        "expected": to_base64(revision.hash),
        "computed": to_base64(computed),
        "valid": valid,
    }
    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print(f"document_id: {result['document_id']}")
        print(f"version: {result['version']}")
        print(f"expected: {result['expected']}")
        print(f"computed: {result['computed']}")
        print(f"valid: {str(valid).lower()}")

    if not valid:
        logger.warning("Revision content does not hash to the revision hash")
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
