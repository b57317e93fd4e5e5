"""Encoding and decoding of cache envelopes.

An entry file holds a fixed header followed by a pickled payload:

    MAGIC (4 bytes) | payload length (8 bytes, big-endian) | MD5 of payload (16 bytes) | payload

The length and digest let `decode` reject truncated or spliced files before
anything is unpickled.
"""

import hashlib
import logging
import pickle
import struct
from typing import Any

from filecache.domain.exceptions import CorruptEntryError
from filecache.domain.models.common import Envelope, ExpireAt

logger = logging.getLogger(__name__)

MAGIC = b"FCE1"
_HEADER = struct.Struct(">4sQ16s")
HEADER_SIZE = _HEADER.size


def encode(value: Any, expire_at: ExpireAt) -> bytes:
    """Serializes a value and its expiry into envelope bytes.

    Raises:
        pickle.PicklingError, TypeError, AttributeError: If the value cannot be pickled.
    """
    payload = pickle.dumps({"value": value, "expire": expire_at}, protocol=pickle.HIGHEST_PROTOCOL)
    digest = hashlib.md5(payload).digest()
    return _HEADER.pack(MAGIC, len(payload), digest) + payload


def decode(data: bytes) -> Envelope:
    """Parses envelope bytes produced by `encode`.

    Raises:
        CorruptEntryError: If the bytes are truncated, tampered with, or lack
            the required fields.
    """
    if len(data) < HEADER_SIZE:
        raise CorruptEntryError(f"Entry too short: {len(data)} bytes")

    magic, length, digest = _HEADER.unpack_from(data)
    if magic != MAGIC:
        raise CorruptEntryError(f"Bad magic: {magic!r}")

    payload = data[HEADER_SIZE:]
    if len(payload) != length:
        raise CorruptEntryError(f"Payload length mismatch: header says {length}, found {len(payload)}")
    if hashlib.md5(payload).digest() != digest:
        raise CorruptEntryError("Payload digest mismatch")

    try:
        record = pickle.loads(payload)
    except Exception as e:
        # A payload with a valid digest can still reference classes that no longer import
        raise CorruptEntryError(f"Failed to unpickle payload: {e}") from e

    if not isinstance(record, dict) or "value" not in record or "expire" not in record:
        raise CorruptEntryError("Payload is missing required fields")

    expire_at = record["expire"]
    if expire_at is not None and (isinstance(expire_at, bool) or not isinstance(expire_at, (int, float))):
        raise CorruptEntryError(f"Invalid expiry: {expire_at!r}")

    return Envelope(value=record["value"], expire_at=None if expire_at is None else float(expire_at))
