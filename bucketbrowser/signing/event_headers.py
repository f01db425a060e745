# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Binary encoding of event-stream message headers.

Each header is encoded as a one-byte name length, the UTF-8 name, a
one-byte type tag and the type-specific value.  Integers are big-endian.
"""

import re
import struct
import uuid
from collections.abc import Mapping
from datetime import datetime

from bucketbrowser.signing.types import EventHeader


BOOL_TRUE = 0
BOOL_FALSE = 1
BYTE = 2
SHORT = 3
INTEGER = 4
LONG = 5
BYTE_ARRAY = 6
STRING = 7
TIMESTAMP = 8
UUID = 9

_UUID_RE = re.compile(
    r"^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$"
)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def int64_bytes(value: int) -> bytes:
    """Encode an integer as an 8-byte big-endian two's complement value.

    Raises:
        ValueError: If the value does not fit in 64 bits.
    """
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(
            f"{value} is too large (or, if negative, too small) "
            "to represent as an Int64"
        )
    return value.to_bytes(8, "big", signed=True)


def encode_headers(headers: Mapping[str, EventHeader]) -> bytes:
    """Encode headers in iteration order.

    Args:
        headers: Header name to typed value.

    Returns:
        Concatenated binary header block.

    Raises:
        ValueError: On an unknown type, an oversized name or value, or a
            malformed UUID.
    """
    chunks: list[bytes] = []
    for name, header in headers.items():
        name_bytes = name.encode("utf-8")
        if len(name_bytes) > 255:
            raise ValueError(f"Header name too long: {name!r}")
        chunks.append(bytes([len(name_bytes)]))
        chunks.append(name_bytes)
        chunks.append(encode_header_value(header))
    return b"".join(chunks)


def encode_header_value(header: EventHeader) -> bytes:
    """Encode a single typed header value, including its type tag."""
    value = header.value
    kind = header.type

    if kind == "boolean":
        return bytes([BOOL_TRUE if value else BOOL_FALSE])
    if kind == "byte":
        return struct.pack(">Bb", BYTE, value)
    if kind == "short":
        return struct.pack(">Bh", SHORT, value)
    if kind == "integer":
        return struct.pack(">Bi", INTEGER, value)
    if kind == "long":
        return bytes([LONG]) + int64_bytes(int(value))
    if kind == "binary":
        data = bytes(value)
        return struct.pack(">BH", BYTE_ARRAY, len(data)) + data
    if kind == "string":
        data = value.encode("utf-8")
        return struct.pack(">BH", STRING, len(data)) + data
    if kind == "timestamp":
        if isinstance(value, datetime):
            millis = round(value.timestamp() * 1000)
        else:
            millis = round(value)
        return bytes([TIMESTAMP]) + int64_bytes(millis)
    if kind == "uuid":
        text = str(value)
        if not _UUID_RE.match(text):
            raise ValueError(f"Invalid UUID received: {text}")
        return bytes([UUID]) + uuid.UUID(text).bytes

    raise ValueError(f"Unknown event header type: {kind!r}")
