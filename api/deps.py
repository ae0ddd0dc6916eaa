"""
API Dependencies

Dependency injection for the API.
Provides the runtime configuration and the shared ledger client registry.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from core.config.runtime import RuntimeConfig
from core.ledger import LedgerClientRegistry

logger = logging.getLogger(__name__)

CONFIG_SEARCH_NAMES = ("ledgerproof.json", ".ledgerproof.json")

_registry: Optional[LedgerClientRegistry] = None
_registry_lock = threading.Lock()


def _config_search_paths() -> list[Path]:
    paths = [Path.cwd() / name for name in CONFIG_SEARCH_NAMES]
    paths.append(Path.home() / ".config" / "ledgerproof" / "config.json")
    return paths


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./ledgerproof.json
      2. ./.ledgerproof.json
      3. ~/.config/ledgerproof/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    config: RuntimeConfig | None = None

    for path in _config_search_paths():
        if path.exists():
            try:
                config = RuntimeConfig.from_file(path)
                logger.info("Loaded config from %s", path)
                break
            except (OSError, ValueError, TypeError) as e:
                logger.warning("Failed to parse %s: %s", path, e)

    if config is None:
        # No config file found, start with defaults
        config = RuntimeConfig()

    # Always apply environment variable overrides
    return config.with_env_overrides()


def get_runtime_config() -> RuntimeConfig:
    """Runtime configuration for a request."""
    return _load_runtime_config()


def get_ledger_registry() -> LedgerClientRegistry:
    """
    Shared registry of HTTP ledger clients.

    Raises:
        LedgerNotConfiguredError: If no ledger endpoint is configured
    """
    global _registry
    with _registry_lock:
        if _registry is None:
            config = _load_runtime_config()
            if not config.ledger.endpoint:
                from api.errors import LedgerNotConfiguredError
                raise LedgerNotConfiguredError(
                    "Set LEDGERPROOF_LEDGER_ENDPOINT or ledger.endpoint in ledgerproof.json"
                )
            _registry = LedgerClientRegistry.from_config(config)
        return _registry


def close_ledger_registry() -> None:
    """Close every ledger client opened by this process."""
    global _registry
    with _registry_lock:
        registry, _registry = _registry, None
    if registry is not None:
        registry.close()
