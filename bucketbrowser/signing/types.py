# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Data types for the request signer.

Requests are plain mutable records; the signer always works on a clone
so callers keep their original objects intact.  Signing targets form a
closed set of variants (``SignTarget``) dispatched by ``SigV4Signer.sign``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


#: Query values: a single string, repeated values, or a bare key (None).
QueryValue = str | list[str] | None


@dataclass(frozen=True)
class Credential:
    """Static AWS-style credential.

    Attributes:
        access_key_id: Access key ID.
        secret_access_key: Secret access key.
        session_token: Optional STS session token.
        expiration: Optional UTC expiry of temporary credentials.
    """

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None

    @property
    def is_expired(self) -> bool:
        """True if the credential carries an expiry in the past."""
        if self.expiration is None:
            return False
        return self.expiration <= datetime.now(UTC)


@dataclass
class HttpRequest:
    """Outbound HTTP request description.

    Attributes:
        method: HTTP method.
        hostname: Target host name (without port).
        path: Request path, starting with ``/``.
        protocol: URL scheme, with or without trailing colon.
        port: Optional explicit port.
        query: Query parameters.  Order is irrelevant for signing.
        headers: Header mapping; names may use any casing.
        body: Payload.  ``str`` and bytes-like bodies are hashed; any other
            object is treated as an unsized stream.
        username: Optional userinfo name for URL formatting.
        password: Optional userinfo password for URL formatting.
        fragment: Optional URL fragment.
    """

    method: str
    hostname: str
    path: str = "/"
    protocol: str = "https:"
    port: int | None = None
    query: dict[str, QueryValue] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    username: str | None = None
    password: str | None = None
    fragment: str | None = None

    def clone(self) -> "HttpRequest":
        """Return a copy with independent header and query mappings.

        The body is shared, not copied.
        """
        return HttpRequest(
            method=self.method,
            hostname=self.hostname,
            path=self.path,
            protocol=self.protocol,
            port=self.port,
            query={
                k: list(v) if isinstance(v, list) else v
                for k, v in self.query.items()
            },
            headers=dict(self.headers),
            body=self.body,
            username=self.username,
            password=self.password,
            fragment=self.fragment,
        )

    @property
    def authority(self) -> str:
        """Host with the port appended when one is set."""
        if self.port:
            return f"{self.hostname}:{self.port}"
        return self.hostname

    def has_header(self, name: str) -> bool:
        """Case-insensitive header presence check."""
        return _find_header(name, self.headers) is not None

    def get_header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        found = _find_header(name, self.headers)
        return self.headers[found] if found is not None else None

    def delete_header(self, name: str) -> None:
        """Remove every header matching ``name`` case-insensitively."""
        sought = name.lower()
        for header_name in list(self.headers):
            if header_name.lower() == sought:
                del self.headers[header_name]


def _find_header(name: str, headers: Mapping[str, str]) -> str | None:
    sought = name.lower()
    for header_name in headers:
        if header_name.lower() == sought:
            return header_name
    return None


# ---------------------------------------------------------------------------
# Event stream messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EventHeader:
    """Typed event-stream header value.

    Attributes:
        type: One of ``boolean``, ``byte``, ``short``, ``integer``,
            ``long``, ``binary``, ``string``, ``timestamp``, ``uuid``.
        value: Python value matching the type (``datetime`` or epoch
            milliseconds for timestamps, ``bytes`` for binary).
    """

    type: str
    value: Any


@dataclass(frozen=True)
class EventMessage:
    """Event-stream message: ordered typed headers plus a binary body."""

    headers: dict[str, EventHeader]
    body: bytes


@dataclass(frozen=True)
class SignedMessage:
    """An event-stream message with its chained signature."""

    message: EventMessage
    signature: str


# ---------------------------------------------------------------------------
# Signing targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StringToSign:
    """A precomputed string to sign with the scope's signing key."""

    value: str


@dataclass(frozen=True)
class EventToSign:
    """Pre-encoded event headers and payload chained to a prior signature."""

    headers: bytes
    payload: bytes
    prior_signature: str


@dataclass(frozen=True)
class MessageToSign:
    """An event-stream message chained to a prior signature."""

    message: EventMessage
    prior_signature: str


@dataclass(frozen=True)
class RequestToSign:
    """An HTTP request to sign with an ``Authorization`` header."""

    request: HttpRequest


SignTarget = StringToSign | EventToSign | MessageToSign | RequestToSign
