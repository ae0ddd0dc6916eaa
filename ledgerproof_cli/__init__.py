"""
ledgerproof CLI

Command-line interface for ledger revision verification.

Usage:
    python -m ledgerproof_cli recompute --leaf <b64> --proof <b64> <b64>
    python -m ledgerproof_cli metadata --key-attribute VIN --key-value 1N4AL11D75C109151
    python -m ledgerproof_cli verify metadata.json
    python -m ledgerproof_cli verify-block --strand-id S --sequence-no 42
"""

__version__ = "0.1.0"
