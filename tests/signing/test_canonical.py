# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for bucketbrowser/signing/canonical.py."""

import hashlib
import io
from datetime import UTC, datetime, timedelta, timezone

import pytest

from bucketbrowser.signing.canonical import (
    build_canonical_request,
    build_string_to_sign,
    canonical_headers,
    canonical_path,
    canonical_query_string,
    create_scope,
    escape_path,
    format_date,
    payload_hash,
    signed_header_list,
    to_datetime,
    uri_encode,
)
from bucketbrowser.signing.constants import EMPTY_SHA256, UNSIGNED_PAYLOAD


# ---------------------------------------------------------------------------
# URI encoding
# ---------------------------------------------------------------------------


class TestUriEncode:
    """Tests for uri_encode."""

    def test_unreserved_unchanged(self) -> None:
        """Unreserved characters pass through."""
        assert uri_encode("AZaz09-_.~") == "AZaz09-_.~"

    def test_space_encoded(self) -> None:
        """Spaces become %20, never '+'."""
        assert uri_encode("hello world") == "hello%20world"

    def test_slash_encoded_by_default(self) -> None:
        """Slashes are encoded unless preserved."""
        assert uri_encode("a/b") == "a%2Fb"
        assert uri_encode("a/b", encode_slash=False) == "a/b"

    def test_sub_delims_encoded(self) -> None:
        """Characters encodeURIComponent leaves alone are encoded."""
        assert uri_encode("!'()*") == "%21%27%28%29%2A"

    def test_utf8_bytes(self) -> None:
        """Non-ASCII characters are encoded per UTF-8 byte."""
        assert uri_encode("é") == "%C3%A9"

    def test_uppercase_hex(self) -> None:
        """Percent escapes use uppercase hex digits."""
        assert uri_encode(":") == "%3A"


class TestEscapePath:
    """Tests for escape_path."""

    def test_keeps_slashes(self) -> None:
        """Segments are escaped, separators kept."""
        assert escape_path("my folder/a b.txt") == "my%20folder/a%20b.txt"


# ---------------------------------------------------------------------------
# Canonical path
# ---------------------------------------------------------------------------


class TestCanonicalPath:
    """Tests for canonical_path."""

    def test_empty_path_is_root(self) -> None:
        """An empty path canonicalizes to '/'."""
        assert canonical_path("") == "/"
        assert canonical_path("", uri_escape_path=False) == "/"

    def test_root(self) -> None:
        """The root path is unchanged."""
        assert canonical_path("/") == "/"

    def test_dot_segments_removed(self) -> None:
        """'.' is dropped and '..' pops the previous segment."""
        assert canonical_path("/a/./b/../c") == "/a/c"

    def test_dotdot_never_climbs_above_root(self) -> None:
        """'..' at the root is ignored."""
        assert canonical_path("/../a") == "/a"

    def test_empty_segments_collapsed(self) -> None:
        """Repeated slashes collapse."""
        assert canonical_path("/a//b") == "/a/b"
        assert canonical_path("//") == "/"

    def test_trailing_slash_kept(self) -> None:
        """A trailing slash survives normalization."""
        assert canonical_path("/a/b/") == "/a/b/"

    def test_no_leading_slash_added(self) -> None:
        """A relative path stays relative."""
        assert canonical_path("a/b") == "a/b"

    def test_escapes_segments(self) -> None:
        """Segments are escaped once."""
        assert canonical_path("/my path/file") == "/my%20path/file"

    def test_pre_encoded_path_double_encoded(self) -> None:
        """An already-encoded path is encoded again."""
        assert canonical_path("/a%3Ab") == "/a%253Ab"

    def test_verbatim_without_escaping(self) -> None:
        """Without escaping the path is used exactly as given."""
        path = "/bucket//folder/../a%20b"
        assert canonical_path(path, uri_escape_path=False) == path


# ---------------------------------------------------------------------------
# Canonical query string
# ---------------------------------------------------------------------------


class TestCanonicalQueryString:
    """Tests for canonical_query_string."""

    def test_sorted_by_key(self) -> None:
        """Pairs are ordered by key."""
        assert canonical_query_string({"b": "2", "a": "1"}) == "a=1&b=2"

    def test_empty(self) -> None:
        """No parameters give an empty string."""
        assert canonical_query_string({}) == ""

    def test_signature_excluded(self) -> None:
        """X-Amz-Signature never takes part, in any casing."""
        query = {"a": "1", "X-Amz-Signature": "abc", "x-amz-signature": "d"}
        assert canonical_query_string(query) == "a=1"

    def test_repeated_values_sorted(self) -> None:
        """List values repeat the key and sort among themselves."""
        assert canonical_query_string({"k": ["b", "a"]}) == "k=a&k=b"

    def test_none_dropped(self) -> None:
        """Keys whose value is None are omitted."""
        assert canonical_query_string({"flag": None, "a": "1"}) == "a=1"

    def test_empty_value_kept(self) -> None:
        """An empty string value still renders as 'key='."""
        assert canonical_query_string({"acl": ""}) == "acl="

    def test_keys_and_values_escaped(self) -> None:
        """Keys and values are strictly escaped."""
        assert canonical_query_string({"a b": "c/d"}) == "a%20b=c%2Fd"


# ---------------------------------------------------------------------------
# Canonical headers
# ---------------------------------------------------------------------------


class TestCanonicalHeaders:
    """Tests for canonical_headers."""

    def test_lowercases_and_trims(self) -> None:
        """Names are lower-cased; values trimmed and whitespace collapsed."""
        result = canonical_headers(
            {"Host": "  example.com  ", "X-Custom": "a   b\tc"}
        )
        assert result == {"host": "example.com", "x-custom": "a b c"}

    def test_sorted(self) -> None:
        """Headers come back sorted by name."""
        result = canonical_headers({"z": "1", "A": "2", "m": "3"})
        assert list(result) == ["a", "m", "z"]

    def test_drops_always_unsignable(self) -> None:
        """Authorization and user-agent are never signed."""
        result = canonical_headers(
            {
                "Authorization": "x",
                "User-Agent": "test",
                "host": "example.com",
            }
        )
        assert result == {"host": "example.com"}

    def test_drops_proxy_and_sec_headers(self) -> None:
        """proxy-* and sec-* headers are excluded."""
        result = canonical_headers(
            {
                "Proxy-Authorization": "x",
                "Sec-Fetch-Mode": "cors",
                "host": "example.com",
            }
        )
        assert result == {"host": "example.com"}

    def test_signable_overrides_unsignable(self) -> None:
        """An allow-listed header is signed even when normally excluded."""
        result = canonical_headers(
            {"User-Agent": "test", "host": "h"},
            signable_headers={"user-agent"},
        )
        assert result == {"host": "h", "user-agent": "test"}

    def test_extra_unsignable(self) -> None:
        """Caller-supplied unsignable names are excluded."""
        result = canonical_headers(
            {"X-Custom": "1", "host": "h"}, unsignable_headers={"x-custom"}
        )
        assert result == {"host": "h"}

    def test_none_values_skipped(self) -> None:
        """Headers without a value are ignored."""
        assert canonical_headers({"host": "h", "x-empty": None}) == {
            "host": "h"
        }


class TestSignedHeaderList:
    """Tests for signed_header_list."""

    def test_semicolon_joined(self) -> None:
        """Names are sorted and joined with ';'."""
        assert signed_header_list({"x-b": "1", "host": "2"}) == "host;x-b"


# ---------------------------------------------------------------------------
# Payload hash
# ---------------------------------------------------------------------------


class TestPayloadHash:
    """Tests for payload_hash."""

    def test_explicit_header_wins(self) -> None:
        """A caller-provided hash header is used as-is."""
        headers = {"X-Amz-Content-Sha256": "precomputed"}
        assert payload_hash(headers, b"body") == "precomputed"

    def test_no_body(self) -> None:
        """A missing body hashes to the empty-string digest."""
        assert payload_hash({}, None) == EMPTY_SHA256

    def test_no_body_custom_absent(self) -> None:
        """The absent-body value is configurable."""
        assert payload_hash({}, None, absent=UNSIGNED_PAYLOAD) == (
            UNSIGNED_PAYLOAD
        )

    def test_bytes_body(self) -> None:
        """Bytes bodies are hashed."""
        assert payload_hash({}, b"abc") == hashlib.sha256(b"abc").hexdigest()

    def test_str_body(self) -> None:
        """String bodies are hashed as UTF-8."""
        assert payload_hash({}, "abc") == hashlib.sha256(b"abc").hexdigest()

    def test_stream_body_unsigned(self) -> None:
        """Streams cannot be hashed up front."""
        assert payload_hash({}, io.BytesIO(b"abc")) == UNSIGNED_PAYLOAD


# ---------------------------------------------------------------------------
# Canonical request and string to sign
# ---------------------------------------------------------------------------


class TestBuildCanonicalRequest:
    """Tests for build_canonical_request."""

    def test_layout(self) -> None:
        """Lines appear in the documented order."""
        result = build_canonical_request(
            "GET",
            "/",
            "",
            {"host": "example.com", "x-amz-date": "20150830T123600Z"},
            EMPTY_SHA256,
        )
        assert result == (
            "GET\n/\n\n"
            "host:example.com\nx-amz-date:20150830T123600Z\n\n"
            "host;x-amz-date\n" + EMPTY_SHA256
        )


class TestBuildStringToSign:
    """Tests for build_string_to_sign."""

    def test_layout(self) -> None:
        """The last line is the SHA-256 of the canonical request."""
        result = build_string_to_sign(
            "AWS4-HMAC-SHA256",
            "20150830T123600Z",
            "20150830/us-east-1/service/aws4_request",
            "canonical",
        )
        assert result.split("\n") == [
            "AWS4-HMAC-SHA256",
            "20150830T123600Z",
            "20150830/us-east-1/service/aws4_request",
            hashlib.sha256(b"canonical").hexdigest(),
        ]


class TestCreateScope:
    """Tests for create_scope."""

    def test_scope(self) -> None:
        """Scope is date/region/service/aws4_request."""
        assert create_scope("20130524", "us-east-1", "s3") == (
            "20130524/us-east-1/s3/aws4_request"
        )


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


class TestFormatDate:
    """Tests for format_date and to_datetime."""

    def test_datetime(self) -> None:
        """Aware datetimes format as long and short dates."""
        assert format_date(datetime(2013, 5, 24, tzinfo=UTC)) == (
            "20130524T000000Z",
            "20130524",
        )

    def test_epoch_seconds(self) -> None:
        """Numbers are epoch seconds."""
        assert format_date(0) == ("19700101T000000Z", "19700101")
        assert format_date(1369353600.0)[0] == "20130524T000000Z"

    def test_numeric_string(self) -> None:
        """Numeric strings are epoch seconds."""
        assert format_date("1369353600")[0] == "20130524T000000Z"

    def test_iso_string(self) -> None:
        """Other strings are parsed as ISO 8601."""
        assert format_date("2013-05-24T00:00:00Z")[0] == "20130524T000000Z"

    def test_naive_datetime_is_utc(self) -> None:
        """Naive datetimes are taken to be UTC."""
        assert format_date(datetime(2013, 5, 24))[0] == "20130524T000000Z"

    def test_converts_to_utc(self) -> None:
        """Other time zones are converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2013, 5, 24, 2, 0, tzinfo=plus_two)
        assert format_date(value)[0] == "20130524T000000Z"

    def test_invalid_string_raises(self) -> None:
        """Unparseable strings raise ValueError."""
        with pytest.raises(ValueError):
            to_datetime("not a date")
