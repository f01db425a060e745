# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for bucketbrowser/signing/event_headers.py."""

import uuid
from datetime import UTC, datetime

import pytest

from bucketbrowser.signing import EventHeader
from bucketbrowser.signing.event_headers import (
    encode_header_value,
    encode_headers,
    int64_bytes,
)


class TestEncodeHeaderValue:
    """Tests for encode_header_value."""

    def test_boolean(self) -> None:
        """Booleans are encoded in the type tag alone."""
        assert encode_header_value(EventHeader("boolean", True)) == b"\x00"
        assert encode_header_value(EventHeader("boolean", False)) == b"\x01"

    def test_byte(self) -> None:
        """Bytes are one signed byte."""
        assert encode_header_value(EventHeader("byte", -1)) == b"\x02\xff"

    def test_short(self) -> None:
        """Shorts are two big-endian bytes."""
        assert encode_header_value(EventHeader("short", 258)) == b"\x03\x01\x02"

    def test_integer(self) -> None:
        """Integers are four big-endian bytes."""
        assert encode_header_value(EventHeader("integer", 1)) == (
            b"\x04\x00\x00\x00\x01"
        )

    def test_long(self) -> None:
        """Longs are eight-byte two's complement."""
        assert encode_header_value(EventHeader("long", -1)) == (
            b"\x05" + b"\xff" * 8
        )

    def test_binary(self) -> None:
        """Binary values carry a two-byte length prefix."""
        assert encode_header_value(EventHeader("binary", b"xy")) == (
            b"\x06\x00\x02xy"
        )

    def test_string(self) -> None:
        """Strings are UTF-8 with a two-byte length prefix."""
        assert encode_header_value(EventHeader("string", "é")) == (
            b"\x07\x00\x02\xc3\xa9"
        )

    def test_timestamp_datetime(self) -> None:
        """Datetimes are epoch milliseconds."""
        value = datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)
        assert encode_header_value(EventHeader("timestamp", value)) == (
            b"\x08" + (1000).to_bytes(8, "big")
        )

    def test_timestamp_millis(self) -> None:
        """Numbers are taken as epoch milliseconds."""
        assert encode_header_value(EventHeader("timestamp", 5)) == (
            b"\x08" + (5).to_bytes(8, "big")
        )

    def test_uuid(self) -> None:
        """UUIDs are their sixteen raw bytes."""
        value = "12345678-1234-5678-1234-567812345678"
        assert encode_header_value(EventHeader("uuid", value)) == (
            b"\x09" + uuid.UUID(value).bytes
        )

    def test_invalid_uuid(self) -> None:
        """Malformed and upper-case UUIDs are rejected."""
        with pytest.raises(ValueError, match="Invalid UUID"):
            encode_header_value(EventHeader("uuid", "not-a-uuid"))
        with pytest.raises(ValueError, match="Invalid UUID"):
            encode_header_value(
                EventHeader("uuid", "ABCDEF00-1234-5678-1234-567812345678")
            )

    def test_unknown_type(self) -> None:
        """Unknown types are rejected."""
        with pytest.raises(ValueError, match="Unknown event header type"):
            encode_header_value(EventHeader("float", 1.0))


class TestEncodeHeaders:
    """Tests for encode_headers."""

    def test_name_prefix(self) -> None:
        """Each header starts with its name length and name."""
        encoded = encode_headers({"a": EventHeader("string", "hi")})
        assert encoded == b"\x01a\x07\x00\x02hi"

    def test_order_preserved(self) -> None:
        """Headers are encoded in iteration order."""
        encoded = encode_headers(
            {
                "b": EventHeader("boolean", True),
                "a": EventHeader("boolean", False),
            }
        )
        assert encoded == b"\x01b\x00\x01a\x01"

    def test_empty(self) -> None:
        """No headers encode to nothing."""
        assert encode_headers({}) == b""

    def test_name_too_long(self) -> None:
        """Names longer than 255 bytes cannot be encoded."""
        with pytest.raises(ValueError):
            encode_headers({"x" * 256: EventHeader("boolean", True)})


class TestInt64Bytes:
    """Tests for int64_bytes."""

    def test_bounds(self) -> None:
        """The full signed 64-bit range is accepted."""
        assert int64_bytes(2**63 - 1) == b"\x7f" + b"\xff" * 7
        assert int64_bytes(-(2**63)) == b"\x80" + b"\x00" * 7

    def test_overflow(self) -> None:
        """Values outside the range raise."""
        with pytest.raises(ValueError):
            int64_bytes(2**63)
        with pytest.raises(ValueError):
            int64_bytes(-(2**63) - 1)
