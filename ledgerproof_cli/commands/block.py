"""
CLI Verify-Block Command

Verify a journal block's hash against the ledger's current digest.

Usage:
    ledgerproof verify-block --strand-id S --sequence-no N [--ledger NAME] [--self-check] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from core.ledger import BlockVerifier
from core.schemas.ledger import BlockAddress
from ledgerproof_cli import ledger as ledger_access


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def verify_block_cmd(args: Namespace) -> int:
    """
    Execute the verify-block command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config
    ledger_name = ledger_access.resolve_ledger_name(args, config)
    block_address = BlockAddress(strand_id=args.strand_id, sequence_no=args.sequence_no)
    self_check = args.self_check or config.self_check

    with ledger_access.open_registry(config) as registry:
        verifier = BlockVerifier(registry.get(ledger_name))
        verified = verifier.verify(ledger_name, block_address, self_check=self_check)

    result = {
        "ledger_name": ledger_name,
        "block_address": str(block_address),
        "verified": verified,
        "self_check": self_check and verified,
    }
    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print(f"ledger: {ledger_name}")
        print(f"block_address: {block_address}")
        print(f"verified: {str(verified).lower()}")

    return EXIT_SUCCESS if verified else EXIT_VERIFICATION_FAILED
