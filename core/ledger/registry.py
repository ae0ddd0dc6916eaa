"""
Ledger Client Registry

Caches one LedgerClient per ledger name. Clients are created on first use
and closed together when the registry is closed.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, TYPE_CHECKING

from .client import LedgerClient
from .http_client import HttpLedgerClient

if TYPE_CHECKING:
    from core.config import RuntimeConfig


logger = logging.getLogger(__name__)


class LedgerClientRegistry:
    """
    Registry of open ledger clients.

    Usage:
        with LedgerClientRegistry(lambda name: HttpLedgerClient(endpoint)) as registry:
            client = registry.get("vehicle-registration")
            digest = client.fetch_digest("vehicle-registration")
    """

    def __init__(self, factory: Callable[[str], LedgerClient]) -> None:
        """
        Args:
            factory: Builds a client for a ledger name
        """
        self._factory = factory
        self._clients: dict[str, LedgerClient] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: "RuntimeConfig") -> "LedgerClientRegistry":
        """Registry whose clients talk HTTP to the configured endpoint."""
        endpoint = config.ledger.endpoint
        timeout = config.http.timeout
        user_agent = config.http.user_agent
        proxy = config.proxy
        return cls(
            lambda _name: HttpLedgerClient(
                endpoint, timeout=timeout, user_agent=user_agent, proxy=proxy
            )
        )

    def get(self, ledger_name: str) -> LedgerClient:
        """Return the cached client for a ledger, creating it if needed."""
        with self._lock:
            client = self._clients.get(ledger_name)
            if client is None:
                logger.debug("Opening ledger client for %s", ledger_name)
                client = self._factory(ledger_name)
                self._clients[ledger_name] = client
            return client

    def __contains__(self, ledger_name: str) -> bool:
        return ledger_name in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def close(self) -> None:
        """
        Close every cached client and forget them.

        A client failing to close does not stop the others from closing;
        the first failure is re-raised once all of them have been tried.
        """
        with self._lock:
            clients, self._clients = self._clients, {}
        first_error: Optional[Exception] = None
        for name, client in clients.items():
            logger.debug("Closing ledger client for %s", name)
            try:
                client.close()
            except Exception as e:
                logger.error("Failed to close ledger client for %s: %s", name, e)
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def __enter__(self) -> "LedgerClientRegistry":
        return self

    def __exit__(self, *args) -> None:
        self.close()


__all__ = ["LedgerClientRegistry"]
