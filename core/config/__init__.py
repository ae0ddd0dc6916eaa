"""
Runtime Configuration Module

Provides configuration loading and management for ledgerproof.
"""

from .runtime import (
    ENV_PREFIX,
    HttpConfig,
    LedgerConfig,
    LoggingConfig,
    RuntimeConfig,
    VerifierConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "ENV_PREFIX",
    "HttpConfig",
    "LedgerConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "VerifierConfig",
    "get_default_config",
    "set_default_config",
]
