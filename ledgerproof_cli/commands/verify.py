"""
CLI Verify Command

Verify a captured RevisionMetadata bundle against the ledger:
- Re-fetch the revision and proof up to the bundle's digest tip
- Reconcile revision hash, document id and block address
- Check that the proof reproduces the bundle's digest
- Optionally run the bit-flip self-check

Usage:
    ledgerproof verify metadata.json [--validate-content] [--self-check] [--json] [--debug]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any

from core.crypto.hashing import to_base64
from core.ledger import MetadataVerifier
from core.schemas.ledger import RevisionMetadata
from ledgerproof_cli import ledger as ledger_access


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of bundle verification for CLI output."""
    metadata_path: str = ""
    ledger_name: str = ""
    table_name: str = ""
    document_id: str = ""
    block_address: str = ""
    digest: str = ""
    verified: bool = False
    self_check: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_metadata(path: Path) -> RevisionMetadata:
    """Load a RevisionMetadata bundle from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return RevisionMetadata.model_validate(json.load(f))


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"metadata: {summary.metadata_path}")
    print(f"ledger: {summary.ledger_name}")
    print(f"table: {summary.table_name}")
    print(f"document_id: {summary.document_id}")
    print(f"block_address: {summary.block_address}")
    print(f"digest: {summary.digest}")
    print(f"verified: {str(summary.verified).lower()}")
    if summary.self_check:
        print("self_check: passed")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config
    metadata_path = Path(args.metadata_file)

    if not metadata_path.exists():
        print(f"Error: Metadata file not found: {metadata_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    metadata = load_metadata(metadata_path)
    validate_content = args.validate_content or config.validate_content
    self_check = args.self_check or config.self_check

    with ledger_access.open_registry(config) as registry:
        verifier = MetadataVerifier(
            registry.get(metadata.ledger_name),
            validate_content=validate_content,
        )
        verified = verifier.verify(metadata, self_check=self_check)

    summary = VerifySummary(
        metadata_path=str(metadata_path),
        ledger_name=metadata.ledger_name,
        table_name=metadata.table_name,
        document_id=metadata.document_id,
        block_address=str(metadata.block_address),
        digest=to_base64(metadata.ledger_digest.digest),
        verified=verified,
        self_check=self_check and verified,
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if verified:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
