"""
HTTP Client Module

Session-backed HTTP client used by the ledger service adapter.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
