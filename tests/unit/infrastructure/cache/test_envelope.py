import hashlib
import pickle
import struct

import pytest

from filecache.domain.exceptions import CorruptEntryError
from filecache.domain.models.common import Envelope
from filecache.infrastructure.cache import envelope


def build(record) -> bytes:
    """Frames an arbitrary pickled record with a valid header."""
    payload = pickle.dumps(record)
    return struct.pack(">4sQ16s", envelope.MAGIC, len(payload), hashlib.md5(payload).digest()) + payload


def test_encode_decode_with_expiry():
    data = envelope.encode({"a": [1, 2]}, 1_700_000_060.5)
    decoded = envelope.decode(data)
    assert decoded == Envelope(value={"a": [1, 2]}, expire_at=1_700_000_060.5)


def test_encode_decode_without_expiry():
    decoded = envelope.decode(envelope.encode("value", None))
    assert decoded.value == "value"
    assert decoded.expire_at is None


def test_header_layout():
    data = envelope.encode("value", None)
    assert data.startswith(envelope.MAGIC)
    _, length, digest = struct.unpack_from(">4sQ16s", data)
    payload = data[envelope.HEADER_SIZE:]
    assert length == len(payload)
    assert digest == hashlib.md5(payload).digest()


def test_integer_expiry_is_read_as_float():
    decoded = envelope.decode(build({"value": 1, "expire": 100}))
    assert decoded.expire_at == 100.0
    assert isinstance(decoded.expire_at, float)


@pytest.mark.parametrize("data", [
    b"",
    b"FCE1",
    b"garbage bytes that are long enough to hold a header",
    b"\x00" * 64,
])
def test_rejects_garbage(data):
    with pytest.raises(CorruptEntryError):
        envelope.decode(data)


def test_rejects_wrong_magic():
    data = envelope.encode("value", None)
    with pytest.raises(CorruptEntryError, match="magic"):
        envelope.decode(b"XXXX" + data[4:])


def test_rejects_truncation():
    data = envelope.encode("x" * 500, None)
    for cut in (envelope.HEADER_SIZE, envelope.HEADER_SIZE + 1, len(data) - 1):
        with pytest.raises(CorruptEntryError):
            envelope.decode(data[:cut])


def test_rejects_trailing_bytes():
    with pytest.raises(CorruptEntryError, match="length"):
        envelope.decode(envelope.encode("value", None) + b"extra")


def test_rejects_flipped_payload_byte():
    data = bytearray(envelope.encode("value" * 10, None))
    data[-5] ^= 0xFF
    with pytest.raises(CorruptEntryError, match="digest"):
        envelope.decode(bytes(data))


def test_rejects_spliced_entries():
    first = envelope.encode("a" * 100, None)
    second = envelope.encode("b" * 100, None)
    spliced = first[: len(first) // 2] + second[len(second) // 2:]
    with pytest.raises(CorruptEntryError):
        envelope.decode(spliced)


@pytest.mark.parametrize("record", [
    ["value", None],
    {"value": 1},
    {"expire": None},
    {"value": 1, "expire": "tomorrow"},
    {"value": 1, "expire": True},
])
def test_rejects_records_with_bad_fields(record):
    with pytest.raises(CorruptEntryError):
        envelope.decode(build(record))


def test_rejects_unpicklable_payload():
    payload = b"\x80\x05not a pickle"
    data = struct.pack(">4sQ16s", envelope.MAGIC, len(payload), hashlib.md5(payload).digest()) + payload
    with pytest.raises(CorruptEntryError, match="unpickle"):
        envelope.decode(data)


def test_envelope_expiry():
    assert Envelope("v", None).is_expired(now=10**12) is False
    assert Envelope("v", 100.0).is_expired(now=99.0) is False
    assert Envelope("v", 100.0).is_expired(now=100.0) is False
    assert Envelope("v", 100.0).is_expired(now=100.5) is True
