"""
CLI Recompute Command

Fold a proof over a leaf hash offline and print the candidate digest.

Usage:
    ledgerproof recompute --leaf <b64> --proof <b64> <b64> [--digest <b64>] [--json]
    ledgerproof recompute --leaf <b64> --proof-ion '[{{..}},{{..}}]'
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from typing import Any

from core.crypto.hashing import from_base64, to_base64
from core.proofs import fold_steps, parse_proof


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class RecomputeSummary:
    """Summary of a digest recomputation for CLI output."""
    leaf: str = ""
    digest: str = ""
    steps: list[str] = field(default_factory=list)
    expected_digest: str | None = None
    verified: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.expected_digest is None:
            del d["expected_digest"]
            del d["verified"]
        return d


def recompute(leaf_b64: str, proof: Any, expected_b64: str | None = None) -> RecomputeSummary:
    """Recompute the digest for a Base64 leaf and a proof in any accepted form."""
    leaf = from_base64(leaf_b64)
    hashes = parse_proof(proof)
    steps = fold_steps(leaf, hashes)
    candidate = steps[-1] if steps else leaf

    summary = RecomputeSummary(
        leaf=to_base64(leaf),
        digest=to_base64(candidate),
        steps=[to_base64(step) for step in steps],
    )
    if expected_b64 is not None:
        summary.expected_digest = expected_b64
        summary.verified = candidate == from_base64(expected_b64)
    return summary


def print_summary_human(summary: RecomputeSummary) -> None:
    """Print summary in human-readable format."""
    print(f"leaf: {summary.leaf}")
    for i, step in enumerate(summary.steps):
        print(f"  step {i}: {step}")
    print(f"digest: {summary.digest}")
    if summary.verified is not None:
        print(f"expected: {summary.expected_digest}")
        print(f"verified: {str(summary.verified).lower()}")


def recompute_cmd(args: Namespace) -> int:
    """
    Execute the recompute command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    proof: Any = args.proof_ion if args.proof_ion is not None else (args.proof or [])
    summary = recompute(args.leaf, proof, args.digest)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.verified is False:
        logger.warning("Recomputed digest does not match the expected digest")
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
