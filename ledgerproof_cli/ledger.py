"""
CLI Ledger Access

Builds ledger clients for commands that talk to a ledger.
"""

from __future__ import annotations

from argparse import Namespace

from core.ledger import LedgerClientRegistry
from core.schemas.errors import LedgerClientException
from ledgerproof_cli.config import CLIConfig


def open_registry(config: CLIConfig) -> LedgerClientRegistry:
    """
    Registry of HTTP ledger clients for the configured endpoint.

    Raises:
        LedgerClientException: If no endpoint is configured
    """
    if not config.endpoint:
        raise LedgerClientException(
            "No ledger endpoint configured "
            "(set LEDGERPROOF_LEDGER_ENDPOINT or ledger.endpoint in ledgerproof.json)",
            retryable=False,
        )
    return LedgerClientRegistry.from_config(config.to_runtime_config())


def resolve_ledger_name(args: Namespace, config: CLIConfig) -> str:
    """--ledger, falling back to the configured ledger name."""
    name = getattr(args, "ledger", None) or config.ledger_name
    if not name:
        raise ValueError("No ledger name given (use --ledger or set LEDGERPROOF_LEDGER_NAME)")
    return name


def resolve_table_name(args: Namespace, config: CLIConfig) -> str:
    """--table, falling back to the configured table name."""
    name = getattr(args, "table", None) or config.table_name
    if not name:
        raise ValueError("No table name given (use --table or set LEDGERPROOF_TABLE_NAME)")
    return name
