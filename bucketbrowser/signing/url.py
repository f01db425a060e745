# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""URL formatting for (presigned) requests."""

from collections.abc import Mapping

from bucketbrowser.signing.canonical import escape_uri
from bucketbrowser.signing.types import HttpRequest, QueryValue


def build_query_string(query: Mapping[str, QueryValue]) -> str:
    """Serialize query parameters in sorted key order.

    List values repeat the key once per item.  A None value renders as
    the bare key.
    """
    parts: list[str] = []
    for key in sorted(query):
        value = query[key]
        encoded_key = escape_uri(key)
        if isinstance(value, list):
            parts.extend(f"{encoded_key}={escape_uri(v)}" for v in value)
        elif value is None:
            parts.append(encoded_key)
        else:
            parts.append(f"{encoded_key}={escape_uri(value)}")
    return "&".join(parts)


def format_url(request: HttpRequest) -> str:
    """Render a request as an absolute URL.

    Produces ``protocol//[user:pass@]host[:port]/path[?query][#fragment]``.
    """
    protocol = request.protocol or ""
    if protocol and not protocol.endswith(":"):
        protocol += ":"

    path = request.path or ""
    if path and not path.startswith("/"):
        path = "/" + path

    auth = ""
    if request.username is not None or request.password is not None:
        auth = f"{request.username or ''}:{request.password or ''}@"

    port = f":{request.port}" if request.port else ""
    query = build_query_string(request.query)
    query = f"?{query}" if query else ""
    fragment = f"#{request.fragment}" if request.fragment else ""

    return f"{protocol}//{auth}{request.hostname}{port}{path}{query}{fragment}"
