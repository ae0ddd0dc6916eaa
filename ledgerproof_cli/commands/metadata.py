"""
CLI Metadata Command

Capture a RevisionMetadata bundle from the ledger, either for a known
document id and block address, for the revision a transaction wrote, or
for the latest revision matching a key.

Usage:
    ledgerproof metadata --document-id ID --strand-id S --sequence-no N [--out FILE]
    ledgerproof metadata --document-id ID --transaction-id TX [--out FILE]
    ledgerproof metadata --key-attribute VIN --key-value 1N4AL11D75C109151 [--out FILE]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.ledger import LedgerMetadataFetcher
from core.schemas.ledger import BlockAddress, RevisionMetadata
from ledgerproof_cli import ledger as ledger_access


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def _selection(args: Namespace) -> str | None:
    """Which lookup the arguments ask for: "key", "address" or "transaction"."""
    by_key = args.key_attribute is not None or args.key_value is not None
    by_document = args.document_id is not None
    if by_key == by_document:
        return None
    if by_key:
        if args.key_attribute is None or args.key_value is None:
            raise ValueError("--key-attribute and --key-value go together")
        return "key"
    if args.transaction_id is not None:
        if args.strand_id is not None or args.sequence_no is not None:
            raise ValueError("--transaction-id replaces --strand-id/--sequence-no")
        return "transaction"
    if args.strand_id is None or args.sequence_no is None:
        raise ValueError("--document-id needs --strand-id and --sequence-no, or --transaction-id")
    return "address"


def metadata_cmd(args: Namespace) -> int:
    """
    Execute the metadata command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config
    try:
        selection = _selection(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    if selection is None:
        print(
            "Error: Use either --document-id with --strand-id/--sequence-no or "
            "--transaction-id, or --key-attribute with --key-value",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    ledger_name = ledger_access.resolve_ledger_name(args, config)
    table_name = ledger_access.resolve_table_name(args, config)

    with ledger_access.open_registry(config) as registry:
        fetcher = LedgerMetadataFetcher(
            registry.get(ledger_name),
            retry_delay_s=config.digest_retry_delay,
        )
        if selection == "key":
            metadata: RevisionMetadata = fetcher.get_revision_metadata_for_key(
                ledger_name, table_name, args.key_attribute, args.key_value
            )
        elif selection == "transaction":
            metadata = fetcher.get_revision_metadata_for_transaction(
                ledger_name, table_name, args.document_id, args.transaction_id
            )
        else:
            metadata = fetcher.get_revision_metadata(
                ledger_name,
                table_name,
                args.document_id,
                BlockAddress(strand_id=args.strand_id, sequence_no=args.sequence_no),
            )

    payload = json.dumps(metadata.to_json_dict(), indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote revision metadata to %s", out_path)
        print(f"Saved metadata for {metadata.document_id} to: {out_path}")
    else:
        print(payload)
    return EXIT_SUCCESS
