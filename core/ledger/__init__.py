"""
Ledger Access & Verification

Collaborator protocol, concrete ledger clients, metadata capture and
verification of captured bundles.

Usage:
    from core.ledger import HttpLedgerClient, LedgerMetadataFetcher, MetadataVerifier

    with HttpLedgerClient("https://ledger.example.com/api") as client:
        metadata = LedgerMetadataFetcher(client).get_revision_metadata_for_key(
            "vehicle-registration", "VehicleRegistration", "VIN", "1N4AL11D75C109151",
        )
        assert MetadataVerifier(client).verify(metadata)
"""
from .client import LedgerClient
from .http_client import HttpLedgerClient
from .memory import DEFAULT_STRAND_ID, InMemoryLedger
from .metadata import DEFAULT_DIGEST_RETRY_DELAY_S, LedgerMetadataFetcher
from .registry import LedgerClientRegistry
from .verifier import BlockVerifier, MetadataVerifier, VerificationStage


__all__ = [
    # Collaborators
    "LedgerClient",
    "HttpLedgerClient",
    "InMemoryLedger",
    "DEFAULT_STRAND_ID",
    "LedgerClientRegistry",
    # Capture
    "LedgerMetadataFetcher",
    "DEFAULT_DIGEST_RETRY_DELAY_S",
    # Verification
    "MetadataVerifier",
    "BlockVerifier",
    "VerificationStage",
]
