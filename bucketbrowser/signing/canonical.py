# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Canonical request construction for SigV4.

Everything here is a pure function of its inputs.  The signer composes
these pieces into the canonical request, string to sign and credential
scope.
"""

import hashlib
import re
from collections.abc import Collection, Mapping
from datetime import UTC, datetime
from typing import Any

from bucketbrowser.signing.constants import (
    ALWAYS_UNSIGNABLE_HEADERS,
    EMPTY_SHA256,
    KEY_TYPE_IDENTIFIER,
    PROXY_HEADER_PATTERN,
    SEC_HEADER_PATTERN,
    SHA256_HEADER,
    SIGNATURE_HEADER,
    SIGV4_TIMESTAMP_FORMAT,
    UNSIGNED_PAYLOAD,
)
from bucketbrowser.signing.types import QueryValue


_AWS_UNRESERVED = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~"
)

_WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# URI encoding (RFC 3986 unreserved set)
# ---------------------------------------------------------------------------


def uri_encode(value: str, *, encode_slash: bool = True) -> str:
    """URI-encode a value using AWS's rules.

    - Unreserved characters are not encoded: A-Z, a-z, 0-9, -, _, ., ~
    - Every other UTF-8 byte is percent-encoded as %XX (uppercase hex),
      including ``!'()*`` which ``encodeURIComponent`` would leave alone
    - Forward slashes (/) are optionally preserved

    Args:
        value: String to encode.
        encode_slash: If True, encode '/'; if False, preserve '/'.

    Returns:
        URI-encoded string.
    """
    result: list[str] = []
    for byte in value.encode("utf-8"):
        ch = chr(byte)
        if ch in _AWS_UNRESERVED:
            result.append(ch)
        elif ch == "/" and not encode_slash:
            result.append("/")
        else:
            result.append(f"%{byte:02X}")
    return "".join(result)


def escape_uri(value: str) -> str:
    """Strictly escape a single URI component (``/`` included)."""
    return uri_encode(value)


def escape_path(path: str) -> str:
    """Escape each ``/``-separated segment of a path, keeping the slashes."""
    return uri_encode(path, encode_slash=False)


# ---------------------------------------------------------------------------
# Canonical request pieces
# ---------------------------------------------------------------------------


def canonical_path(path: str, *, uri_escape_path: bool = True) -> str:
    """Build the canonical URI from a request path.

    With ``uri_escape_path`` the path is normalized (empty and ``.``
    segments dropped, ``..`` pops the previous segment but never climbs
    above the root) and escaped, with ``/`` restored after escaping.  A
    leading slash is kept if present, and a trailing slash is kept when at
    least one segment survives.

    Without it (S3), the path is used verbatim; callers pass a path that
    is already encoded.

    Args:
        path: Request path.
        uri_escape_path: Normalize and escape the path.

    Returns:
        Canonical path.
    """
    if not path:
        return "/"
    if not uri_escape_path:
        return path

    segments: list[str] = []
    for segment in path.split("/"):
        if not segment or segment == ".":
            continue
        if segment == "..":
            if segments:
                segments.pop()
        else:
            segments.append(segment)

    leading = "/" if path.startswith("/") else ""
    trailing = "/" if segments and path.endswith("/") else ""
    normalized = leading + "/".join(segments) + trailing
    return uri_encode(normalized).replace("%2F", "/")


def canonical_query_string(query: Mapping[str, QueryValue]) -> str:
    """Build the canonical query string.

    ``X-Amz-Signature`` is always excluded.  Keys and values are escaped,
    pairs are ordered by escaped key, and repeated values of one key are
    sorted among themselves.  Keys whose value is None are dropped.

    Args:
        query: Query parameters.

    Returns:
        Canonical query string (without leading ``?``).
    """
    serialized: dict[str, str] = {}
    for key, value in query.items():
        if key.lower() == SIGNATURE_HEADER:
            continue
        encoded_key = escape_uri(key)
        if isinstance(value, str):
            serialized[encoded_key] = f"{encoded_key}={escape_uri(value)}"
        elif isinstance(value, list):
            pairs = sorted(f"{encoded_key}={escape_uri(v)}" for v in value)
            if pairs:
                serialized[encoded_key] = "&".join(pairs)
    return "&".join(serialized[key] for key in sorted(serialized))


def canonical_headers(
    headers: Mapping[str, str | None],
    unsignable_headers: Collection[str] | None = None,
    signable_headers: Collection[str] | None = None,
) -> dict[str, str]:
    """Select and normalize the headers that take part in the signature.

    Header names are lower-cased; values are trimmed and runs of
    whitespace collapsed to a single space.  Headers in the always
    unsignable set, matching ``proxy-*`` or ``sec-*``, or listed in
    ``unsignable_headers`` are dropped unless ``signable_headers``
    names them.

    Args:
        headers: Request headers.
        unsignable_headers: Extra lower-case names to exclude.
        signable_headers: Lower-case names to include regardless.

    Returns:
        Mapping of lower-case name to canonical value, sorted by name.
    """
    canonical: dict[str, str] = {}
    for name in sorted(headers):
        value = headers[name]
        if value is None:
            continue
        lname = name.lower()
        unsignable = (
            lname in ALWAYS_UNSIGNABLE_HEADERS
            or (unsignable_headers is not None and lname in unsignable_headers)
            or PROXY_HEADER_PATTERN.match(lname) is not None
            or SEC_HEADER_PATTERN.match(lname) is not None
        )
        if unsignable and (
            signable_headers is None or lname not in signable_headers
        ):
            continue
        canonical[lname] = _WHITESPACE_RE.sub(" ", str(value).strip())
    return dict(sorted(canonical.items()))


def signed_header_list(headers: Mapping[str, str]) -> str:
    """Semicolon-joined sorted list of canonical header names."""
    return ";".join(sorted(headers))


def payload_hash(
    headers: Mapping[str, str],
    body: Any,
    *,
    absent: str = EMPTY_SHA256,
) -> str:
    """Determine the payload hash for a request.

    An explicit ``x-amz-content-sha256`` header wins.  Otherwise a missing
    body yields ``absent``, a ``str`` or bytes-like body is hashed, and
    any other body (a stream) is ``UNSIGNED-PAYLOAD``.

    Args:
        headers: Request headers.
        body: Request body.
        absent: Hash to use when there is no body.

    Returns:
        Hex SHA-256 digest or a sentinel value.
    """
    for name, value in headers.items():
        if name.lower() == SHA256_HEADER:
            return value
    if body is None:
        return absent
    if isinstance(body, str):
        return hashlib.sha256(body.encode("utf-8")).hexdigest()
    if isinstance(body, bytes | bytearray | memoryview):
        return hashlib.sha256(body).hexdigest()
    return UNSIGNED_PAYLOAD


def build_canonical_request(
    method: str,
    path: str,
    query: str,
    headers: Mapping[str, str],
    payload: str,
) -> str:
    """Build the canonical request string.

    Args:
        method: HTTP method.
        path: Canonical path.
        query: Canonical query string.
        headers: Canonical headers (from ``canonical_headers``).
        payload: Payload hash.

    Returns:
        Canonical request string.
    """
    names = sorted(headers)
    return "\n".join(
        [
            method,
            path,
            query,
            "\n".join(f"{name}:{headers[name]}" for name in names),
            "",
            ";".join(names),
            payload,
        ]
    )


def build_string_to_sign(
    algorithm: str, long_date: str, scope: str, canonical_request: str
) -> str:
    """Build the string to sign.

    Args:
        algorithm: Algorithm identifier.
        long_date: Timestamp (``YYYYMMDDTHHMMSSZ``).
        scope: Credential scope.
        canonical_request: The canonical request string.

    Returns:
        String to sign.
    """
    return "\n".join(
        [
            algorithm,
            long_date,
            scope,
            hashlib.sha256(canonical_request.encode("utf-8")).hexdigest(),
        ]
    )


def create_scope(short_date: str, region: str, service: str) -> str:
    """Credential scope ``date/region/service/aws4_request``."""
    return f"{short_date}/{region}/{service}/{KEY_TYPE_IDENTIFIER}"


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def to_datetime(value: datetime | int | float | str) -> datetime:
    """Coerce a signing date to an aware UTC datetime.

    Numbers (and numeric strings) are epoch seconds; other strings are
    parsed as ISO 8601.  Naive datetimes are taken to be UTC.

    Raises:
        ValueError: If a string is neither numeric nor ISO 8601.
    """
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value, UTC)
    if isinstance(value, str):
        try:
            return datetime.fromtimestamp(float(value), UTC)
        except ValueError:
            value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_date(value: datetime | int | float | str) -> tuple[str, str]:
    """Format a signing date as ``(long_date, short_date)``.

    Returns:
        ``("YYYYMMDDTHHMMSSZ", "YYYYMMDD")``.
    """
    long_date = to_datetime(value).strftime(SIGV4_TIMESTAMP_FORMAT)
    return long_date, long_date[:8]
