"""
CLI Configuration

Configuration management for the ledgerproof CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from core.config.runtime import (
    HttpConfig,
    LedgerConfig,
    LoggingConfig,
    RuntimeConfig,
    VerifierConfig,
)


# Environment variable prefix
ENV_PREFIX = "LEDGERPROOF_"

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Ledger access
    endpoint: str | None = None
    ledger_name: str | None = None
    table_name: str | None = None
    http_timeout: float = 30.0
    proxy: str | None = None

    # Verification
    digest_retry_delay: float = 0.1
    validate_content: bool = False
    self_check: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    def to_runtime_config(self) -> RuntimeConfig:
        """Runtime configuration for the core ledger and verifier components."""
        return RuntimeConfig(
            ledger=LedgerConfig(
                endpoint=self.endpoint,
                ledger_name=self.ledger_name,
                table_name=self.table_name,
            ),
            http=HttpConfig(timeout=self.http_timeout),
            verifier=VerifierConfig(
                digest_retry_delay_s=self.digest_retry_delay,
                validate_content=self.validate_content,
                self_check=self.self_check,
            ),
            logging=LoggingConfig(level=self.log_level, file=self.log_file),
            proxy=self.proxy,
        )


def _env(name: str) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in _TRUE_VALUES


def load_config_from_env() -> CLIConfig:
    """Load configuration from environment variables."""
    config = CLIConfig()

    # Ledger access
    config.endpoint = _env("LEDGER_ENDPOINT")
    config.ledger_name = _env("LEDGER_NAME")
    config.table_name = _env("TABLE_NAME")
    if _env("HTTP_TIMEOUT"):
        config.http_timeout = float(_env("HTTP_TIMEOUT"))
    config.proxy = _env("HTTP_PROXY")

    # Verification
    if _env("DIGEST_RETRY_DELAY"):
        config.digest_retry_delay = float(_env("DIGEST_RETRY_DELAY"))
    config.validate_content = _env_flag("VALIDATE_CONTENT")
    config.self_check = _env_flag("SELF_CHECK")

    # Logging
    config.log_level = _env("LOG_LEVEL") or "INFO"
    config.log_file = _env("LOG_FILE")

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()

    ledger = data.get("ledger", {})
    config.endpoint = ledger.get("endpoint", config.endpoint)
    config.ledger_name = ledger.get("ledger_name", config.ledger_name)
    config.table_name = ledger.get("table_name", config.table_name)
    config.http_timeout = data.get("http", {}).get("timeout", config.http_timeout)
    config.proxy = data.get("proxy", config.proxy)

    verifier = data.get("verifier", {})
    config.digest_retry_delay = verifier.get("digest_retry_delay_s", config.digest_retry_delay)
    config.validate_content = verifier.get("validate_content", config.validate_content)
    config.self_check = verifier.get("self_check", config.self_check)

    logging_data = data.get("logging", {})
    config.log_level = logging_data.get("level", config.log_level)
    config.log_file = logging_data.get("file", config.log_file)

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    # Start with defaults
    config = CLIConfig()

    # Load from file if provided
    if config_path and config_path.exists():
        config = load_config_from_file(config_path)

    # Check for default config locations
    default_paths = [
        Path.cwd() / "ledgerproof.json",
        Path.cwd() / ".ledgerproof.json",
        Path.home() / ".config" / "ledgerproof" / "config.json",
    ]

    if config_path is None:
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Override with environment variables
    env_config = load_config_from_env()

    # Merge env into config (env takes precedence)
    if _env("LEDGER_ENDPOINT"):
        config.endpoint = env_config.endpoint
    if _env("LEDGER_NAME"):
        config.ledger_name = env_config.ledger_name
    if _env("TABLE_NAME"):
        config.table_name = env_config.table_name
    if _env("HTTP_TIMEOUT"):
        config.http_timeout = env_config.http_timeout
    if _env("HTTP_PROXY"):
        config.proxy = env_config.proxy
    if _env("DIGEST_RETRY_DELAY"):
        config.digest_retry_delay = env_config.digest_retry_delay
    if _env("VALIDATE_CONTENT"):
        config.validate_content = env_config.validate_content
    if _env("SELF_CHECK"):
        config.self_check = env_config.self_check
    if _env("LOG_LEVEL"):
        config.log_level = env_config.log_level
    if _env("LOG_FILE"):
        config.log_file = env_config.log_file

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "ledger": {
    "endpoint": "http://localhost:8080/api",
    "ledger_name": "vehicle-registration",
    "table_name": "VehicleRegistration"
  },
  "http": {
    "timeout": 30.0
  },
  "verifier": {
    "digest_retry_delay_s": 0.1,
    "validate_content": false,
    "self_check": false
  },
  "logging": {
    "level": "INFO",
    "file": null
  }
}
"""
