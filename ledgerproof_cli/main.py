"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m ledgerproof_cli recompute --leaf <b64> --proof <b64>... [--digest <b64>] [--json]
    python -m ledgerproof_cli revision-hash revision.json [--json]
    python -m ledgerproof_cli metadata --document-id ID --strand-id S --sequence-no N [--out FILE]
    python -m ledgerproof_cli metadata --document-id ID --transaction-id TX [--out FILE]
    python -m ledgerproof_cli metadata --key-attribute A --key-value V [--out FILE]
    python -m ledgerproof_cli verify metadata.json [--validate-content] [--self-check] [--json]
    python -m ledgerproof_cli revision metadata.json [--out FILE] [--check]
    python -m ledgerproof_cli verify-block --strand-id S --sequence-no N [--self-check]
    python -m ledgerproof_cli config --init

Environment Variables:
    LEDGERPROOF_LEDGER_ENDPOINT     Base URL of the ledger gateway
    LEDGERPROOF_LEDGER_NAME         Default ledger name
    LEDGERPROOF_TABLE_NAME          Default table name
    LEDGERPROOF_DIGEST_RETRY_DELAY  Stale digest retry delay in seconds (default: 0.1)
    LEDGERPROOF_LOG_LEVEL           Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from core.schemas.errors import LedgerProofException
from ledgerproof_cli.commands import block, metadata, recompute, revision, revision_hash, verify
from ledgerproof_cli.config import load_config, get_default_config_template


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_output_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="ledgerproof",
        description="Verify ledger document revisions against published digests.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./ledgerproof.json or ~/.config/ledgerproof/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- recompute command ---
    recompute_parser = subparsers.add_parser(
        "recompute",
        help="Recompute a digest from a leaf hash and proof (offline)",
        description="Fold a proof over a leaf hash and print the candidate digest.",
    )
    recompute_parser.add_argument(
        "--leaf",
        type=str,
        required=True,
        help="Base64 revision or block hash",
    )
    proof_group = recompute_parser.add_mutually_exclusive_group()
    proof_group.add_argument(
        "--proof",
        type=str,
        nargs="+",
        default=None,
        help="Base64 sibling hashes, leaf first",
    )
    proof_group.add_argument(
        "--proof-ion",
        type=str,
        default=None,
        help="Proof as Ion text, e.g. '[{{...}},{{...}}]'",
    )
    recompute_parser.add_argument(
        "--digest",
        type=str,
        default=None,
        help="Base64 digest to compare against (exit 2 on mismatch)",
    )
    _add_output_flags(recompute_parser)
    recompute_parser.set_defaults(func=recompute.recompute_cmd)

    # --- revision-hash command ---
    revision_parser = subparsers.add_parser(
        "revision-hash",
        help="Check a revision's hash against its content (offline)",
        description="Recompute a revision hash from the revision's data and metadata.",
    )
    revision_parser.add_argument(
        "revision_file",
        type=str,
        help="Path to a revision JSON file",
    )
    _add_output_flags(revision_parser)
    revision_parser.set_defaults(func=revision_hash.revision_hash_cmd)

    # --- metadata command ---
    metadata_parser = subparsers.add_parser(
        "metadata",
        help="Capture a RevisionMetadata bundle from the ledger (online)",
        description="Fetch the digest, revision hash and proof for a document revision.",
    )
    metadata_parser.add_argument("--ledger", type=str, help="Ledger name (default: from config)")
    metadata_parser.add_argument("--table", type=str, help="Table name (default: from config)")
    metadata_parser.add_argument("--document-id", type=str, default=None, help="Document id")
    metadata_parser.add_argument("--strand-id", type=str, default=None, help="Block strand id")
    metadata_parser.add_argument("--sequence-no", type=int, default=None, help="Block sequence number")
    metadata_parser.add_argument("--key-attribute", type=str, default=None, help="Lookup attribute")
    metadata_parser.add_argument("--key-value", type=str, default=None, help="Lookup value")
    metadata_parser.add_argument(
        "--transaction-id",
        type=str,
        default=None,
        help="Transaction that wrote the revision (with --document-id)",
    )
    metadata_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the bundle to this file instead of stdout",
    )
    metadata_parser.add_argument("--debug", action="store_true", default=False, help="Print tracebacks on errors")
    metadata_parser.set_defaults(func=metadata.metadata_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a RevisionMetadata bundle against the ledger (online)",
        description="Reconcile the bundle with ledger state and check its proof.",
    )
    verify_parser.add_argument(
        "metadata_file",
        type=str,
        help="Path to a RevisionMetadata JSON file",
    )
    verify_parser.add_argument(
        "--validate-content",
        action="store_true",
        default=False,
        help="Recompute the revision hash from the fetched content",
    )
    verify_parser.add_argument(
        "--self-check",
        action="store_true",
        default=False,
        help="Check that single-bit changes are detected after a successful verification",
    )
    _add_output_flags(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- revision command ---
    fetch_parser = subparsers.add_parser(
        "revision",
        help="Fetch the revision a RevisionMetadata bundle points to (online)",
        description="Fetch the document revision, content included, for a captured bundle.",
    )
    fetch_parser.add_argument(
        "metadata_file",
        type=str,
        help="Path to a RevisionMetadata JSON file",
    )
    fetch_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the revision to this file instead of stdout",
    )
    fetch_parser.add_argument(
        "--check",
        action="store_true",
        default=False,
        help="Recompute the revision hash from the fetched content",
    )
    fetch_parser.add_argument("--debug", action="store_true", default=False, help="Print tracebacks on errors")
    fetch_parser.set_defaults(func=revision.revision_cmd)

    # --- verify-block command ---
    block_parser = subparsers.add_parser(
        "verify-block",
        help="Verify a journal block against the current digest (online)",
        description="Fetch the current digest and a block's proof and check the block hash.",
    )
    block_parser.add_argument("--ledger", type=str, help="Ledger name (default: from config)")
    block_parser.add_argument("--strand-id", type=str, required=True, help="Block strand id")
    block_parser.add_argument("--sequence-no", type=int, required=True, help="Block sequence number")
    block_parser.add_argument(
        "--self-check",
        action="store_true",
        default=False,
        help="Check that single-bit changes are detected after a successful verification",
    )
    _add_output_flags(block_parser)
    block_parser.set_defaults(func=block.verify_block_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="ledgerproof.json",
        help="Path for config file (default: ledgerproof.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (LEDGERPROOF_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(asdict(args.cli_config), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: ledgerproof config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except LedgerProofException as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
