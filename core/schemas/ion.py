"""
Schemas & Canonicalization
File: ion.py

Purpose: Read the ledger's Ion text and compute Ion hashes of structured
values.

The ledger derives a revision's leaf hash from the Amazon Ion Hash of its
data and of its metadata. Ion Hash hashes struct fields individually and
sorts the field digests, so two values with the same content hash the same
regardless of field order.
"""

import base64
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import ionhash  # noqa: F401  (adds ion_hash() to simpleion values)
from amazon.ion import simpleion
from amazon.ion.core import IonType
from amazon.ion.exceptions import IonException
from amazon.ion.simple_types import IonPyNull

from .errors import CanonicalizationException, ProofFormatException


ION_HASH_ALGORITHM = "SHA256"


def load_ion(text: str) -> Any:
    """
    Parse a single Ion text value.

    Raises:
        ProofFormatException: If the text is not one well-formed Ion value
    """
    try:
        return simpleion.loads(text)
    except (IonException, ValueError) as e:
        raise ProofFormatException(
            f"Invalid Ion text: {e}",
            details={"value": text[:128]},
        ) from e


def dump_ion_text(value: Any) -> str:
    """Render a value as compact Ion text without a version marker."""
    return simpleion.dumps(value, binary=False, omit_version_marker=True)


def ion_type_of(value: Any) -> IonType | None:
    return getattr(value, "ion_type", None)


def to_ion_value(value: Any) -> Any:
    """
    Convert a Python value into its simpleion form.

    Values already loaded from Ion keep their Ion types (decimals, blobs,
    timestamp precision) through the round trip.

    Raises:
        CanonicalizationException: If the value has no Ion representation
    """
    try:
        return simpleion.loads(simpleion.dumps(value, binary=True))
    except (IonException, TypeError, ValueError) as e:
        raise CanonicalizationException(
            f"Value has no Ion representation: {e}",
            details={"type": type(value).__name__},
        ) from e


def ion_hash(value: Any) -> bytes:
    """
    SHA-256 Ion Hash of a structured value.

    Raises:
        CanonicalizationException: If the value has no Ion representation
    """
    return bytes(to_ion_value(value).ion_hash(ION_HASH_ALGORITHM))


def ion_to_json(value: Any) -> Any:
    """
    Plain JSON-compatible rendering of a value loaded from Ion.

    Blobs become Base64 text, timestamps ISO-8601 strings and decimals
    strings. Values that did not come from Ion pass through unchanged.
    """
    if value is None or isinstance(value, IonPyNull):
        return None
    ion_type = ion_type_of(value)
    if isinstance(value, dict) or ion_type is IonType.STRUCT:
        return {str(key): ion_to_json(item) for key, item in value.items()}
    if ion_type is IonType.SYMBOL:
        # Symbol tokens are tuples; keep only their text
        return value.text
    if isinstance(value, (list, tuple)):
        return [ion_to_json(item) for item in value]
    if ion_type is IonType.BOOL:
        return bool(value)
    if ion_type is None:
        return value
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, str):
        return str(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    return value


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_ion_timestamp(value: datetime) -> str:
    """
    Ion text of a commit time at millisecond precision in UTC.

    The ledger records transaction times with millisecond precision, and
    the precision is part of a timestamp's Ion Hash.
    """
    value = ensure_utc(value)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


def ion_timestamp(value: datetime) -> Any:
    """Millisecond-precision Ion timestamp for a commit time."""
    return simpleion.loads(format_ion_timestamp(value))


def parse_ion_blob_list(text: str) -> list[bytes]:
    """
    Decode an Ion list of blobs, e.g. ``[{{AQI=}},{{AwQ=}}]``.

    This is the representation the ledger uses for proofs. Element order is
    preserved.

    Raises:
        ProofFormatException: If the text is not a list of blobs
    """
    value = load_ion(text)
    if ion_type_of(value) is not IonType.LIST:
        raise ProofFormatException(
            "Proof text must be an Ion list of blobs",
            details={"value": text[:64]},
        )
    hashes = []
    for index, element in enumerate(value):
        if ion_type_of(element) is not IonType.BLOB:
            raise ProofFormatException(
                "Proof text contains non-blob elements",
                details={"index": index, "type": str(ion_type_of(element))},
            )
        hashes.append(bytes(element))
    return hashes


def parse_ion_struct(text: str) -> dict[str, Any]:
    """
    Decode Ion text holding a struct.

    Raises:
        ProofFormatException: If the text is not an Ion struct
    """
    value = load_ion(text)
    if ion_type_of(value) is not IonType.STRUCT:
        raise ProofFormatException(
            "Expected an Ion struct",
            details={"value": text[:128]},
        )
    return dict(value)


__all__ = [
    "ION_HASH_ALGORITHM",
    "dump_ion_text",
    "ensure_utc",
    "format_ion_timestamp",
    "ion_hash",
    "ion_timestamp",
    "ion_to_json",
    "ion_type_of",
    "load_ion",
    "parse_ion_blob_list",
    "parse_ion_struct",
    "to_ion_value",
]
