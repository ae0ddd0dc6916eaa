"""
CLI Revision Command

Fetch the document revision a RevisionMetadata bundle points to. What it
writes is the input of ``ledgerproof revision-hash``.

Usage:
    ledgerproof revision metadata.json [--out FILE] [--check]

An --out file ending in .ion receives the ledger's Ion text, which keeps
Ion types (decimals, blobs, timestamps) that JSON cannot carry.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.ledger import LedgerMetadataFetcher
from core.proofs import validate_revision_hash
from ledgerproof_cli import ledger as ledger_access
from ledgerproof_cli.commands.verify import load_metadata


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def revision_cmd(args: Namespace) -> int:
    """
    Execute the revision command.

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
    with ledger_access.open_registry(config) as registry:
        fetcher = LedgerMetadataFetcher(
            registry.get(metadata.ledger_name),
            retry_delay_s=config.digest_retry_delay,
        )
        revision = fetcher.get_revision_for_metadata(metadata)

    payload = json.dumps(revision.model_dump(mode="json", by_alias=True), indent=2)
    if args.out:
        out_path = Path(args.out)
        if out_path.suffix == ".ion":
            payload = revision.to_ion_text()
        out_path.write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote revision to %s", out_path)
        print(f"Saved revision {revision.metadata.id} version {revision.metadata.version} to: {out_path}")
    else:
        print(payload)

    if args.check:
        valid = validate_revision_hash(revision)
        print(f"revision hash: {'valid' if valid else 'INVALID'}", file=sys.stderr)
        if not valid:
            logger.warning("Revision content does not hash to the revision hash")
            return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
