"""
HTTP Ledger Client

LedgerClient implementation that talks JSON to a ledger gateway service.

Endpoints (relative to the configured base URL):
    GET  /ledgers/{ledger}/digest
    POST /ledgers/{ledger}/revision   {"documentId", "blockAddress", "digestTipAddress"}
    POST /ledgers/{ledger}/block      {"blockAddress", "digestTipAddress"}
    GET  /ledgers/{ledger}/tables/{table}/documents?attribute=..&value=..
    GET  /ledgers/{ledger}/tables/{table}/revisions?documentId=..&txId=..

Responses use the camelCase field names of core.schemas.ledger. Proofs, block
addresses and revisions may also arrive as the ledger's Ion text, e.g.
{"IonText": "[{{..}}]"}.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from core.http import HttpClient, HttpError, HttpResponse
from core.schemas.errors import (
    DocumentNotFoundException,
    LedgerClientException,
    ProofFormatException,
)
from core.schemas.ledger import (
    BlockAddress,
    BlockWithProof,
    DocumentLocator,
    LedgerDigest,
    RevisionWithProof,
)


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Server-side failures worth retrying
_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class HttpLedgerClient:
    """
    Ledger client over HTTP.

    Usage:
        with HttpLedgerClient("https://ledger.example.com/api") as client:
            digest = client.fetch_digest("vehicle-registration")
    """

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = 30.0,
        user_agent: str = "ledgerproof/0.1",
        proxy: Optional[str] = None,
        http: Optional[HttpClient] = None,
    ) -> None:
        if not endpoint:
            raise ValueError("Ledger endpoint is required")
        self.endpoint = endpoint.rstrip("/")
        self._http = http or HttpClient(
            timeout=timeout,
            default_headers={
                "Accept": "application/json",
                "User-Agent": user_agent,
            },
            proxy=proxy,
        )

    def _url(self, ledger_name: str, *parts: str) -> str:
        segments = [quote(ledger_name, safe="")]
        segments.extend(quote(part, safe="") for part in parts)
        return f"{self.endpoint}/ledgers/" + "/".join(segments)

    def _call(
        self,
        method: str,
        url: str,
        *,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> HttpResponse:
        try:
            response = self._http.request(method, url, json=json, params=params)
        except HttpError as e:
            raise LedgerClientException(
                f"Ledger request failed: {e}",
                details={"url": url},
            ) from e

        if response.status_code == 404:
            raise DocumentNotFoundException(
                f"Ledger returned 404 for {url}",
                details={"url": url, "body": response.text[:500]},
            )
        if not response.ok:
            logger.warning("Ledger returned HTTP %d for %s", response.status_code, url)
            raise LedgerClientException(
                f"Ledger returned HTTP {response.status_code}",
                details={"url": url, "status": response.status_code, "body": response.text[:500]},
                retryable=response.status_code in _RETRYABLE_STATUS,
            )
        return response

    @staticmethod
    def _parse(model: type[ModelT], response: HttpResponse) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError, ProofFormatException) as e:
            raise LedgerClientException(
                f"Malformed {model.__name__} response: {e}",
                details={"url": response.url},
                retryable=False,
            ) from e

    def fetch_digest(self, ledger_name: str) -> LedgerDigest:
        response = self._call("GET", self._url(ledger_name, "digest"))
        return self._parse(LedgerDigest, response)

    def fetch_revision(
        self,
        ledger_name: str,
        document_id: str,
        block_address: BlockAddress,
        digest_tip_address: BlockAddress,
    ) -> RevisionWithProof:
        body = {
            "documentId": document_id,
            "blockAddress": block_address.model_dump(by_alias=True),
            "digestTipAddress": digest_tip_address.model_dump(by_alias=True),
        }
        response = self._call("POST", self._url(ledger_name, "revision"), json=body)
        return self._parse(RevisionWithProof, response)

    def fetch_block(
        self,
        ledger_name: str,
        block_address: BlockAddress,
        digest_tip_address: BlockAddress,
    ) -> BlockWithProof:
        body = {
            "blockAddress": block_address.model_dump(by_alias=True),
            "digestTipAddress": digest_tip_address.model_dump(by_alias=True),
        }
        response = self._call("POST", self._url(ledger_name, "block"), json=body)
        return self._parse(BlockWithProof, response)

    def lookup_document(
        self,
        ledger_name: str,
        table_name: str,
        key_attribute: str,
        key_value: str,
    ) -> DocumentLocator:
        response = self._call(
            "GET",
            self._url(ledger_name, "tables", table_name, "documents"),
            params={"attribute": key_attribute, "value": key_value},
        )
        return self._parse(DocumentLocator, response)

    def find_revision(
        self,
        ledger_name: str,
        table_name: str,
        document_id: str,
        transaction_id: str,
    ) -> DocumentLocator:
        response = self._call(
            "GET",
            self._url(ledger_name, "tables", table_name, "revisions"),
            params={"documentId": document_id, "txId": transaction_id},
        )
        return self._parse(DocumentLocator, response)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "HttpLedgerClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()


__all__ = ["HttpLedgerClient"]
