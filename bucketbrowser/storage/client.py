# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Minimal S3 client over httpx.

Covers the operations the file manager needs: listing, HEAD, PUT,
DELETE, server-side copy and presigned GET URLs.  Every request is signed
with ``SigV4Signer``.  Errors are mapped to ``TransportError`` or
``NotFound``; nothing is retried.
"""

import logging
import urllib.parse
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Self

import httpx

from bucketbrowser.signing import (
    HttpRequest,
    SigV4Signer,
    format_url,
)
from bucketbrowser.signing.canonical import escape_path
from bucketbrowser.signing.constants import SHA256_HEADER, UNSIGNED_PAYLOAD
from bucketbrowser.signing.signer import CredentialSource, SigningDate
from bucketbrowser.storage.errors import NotFound, TransportError


logger = logging.getLogger(__name__)

COPY_SOURCE_HEADER = "x-amz-copy-source"


@dataclass(frozen=True)
class StoredObjectSummary:
    """One entry of a bucket listing."""

    key: str
    size: int
    last_modified: datetime | None = None
    etag: str | None = None


@dataclass(frozen=True)
class ObjectMetadata:
    """Metadata returned by a HEAD request."""

    key: str
    size: int
    content_type: str | None = None
    etag: str | None = None
    last_modified: datetime | None = None


class ObjectStoreClient:
    """Client for a single S3 bucket.

    Uses virtual-hosted addressing
    (``https://<bucket>.s3.<region>.amazonaws.com/<key>``) unless an
    ``endpoint_url`` is given or ``force_path_style`` is set, in which case
    requests go to ``<endpoint>/<bucket>/<key>``.

    Args:
        bucket: Bucket name.
        region: Bucket region.
        credentials: Credential or credential callable for the signer.
        endpoint_url: Base URL of an S3-compatible service.
        force_path_style: Use path-style addressing against AWS.
        http_client: httpx client to use.  Not closed by ``close()``.
        timeout: Request timeout in seconds for the owned client.
    """

    def __init__(
        self,
        bucket: str,
        region: str,
        credentials: CredentialSource,
        *,
        endpoint_url: str | None = None,
        force_path_style: bool = False,
        http_client: httpx.Client | None = None,
        timeout: float = 30,
    ) -> None:
        if not bucket:
            raise ValueError("bucket must not be empty")
        self.bucket = bucket
        self.region = region
        self._signer = SigV4Signer(
            "s3", region, credentials, uri_escape_path=False
        )

        if endpoint_url:
            parsed = urllib.parse.urlsplit(endpoint_url)
            if not parsed.hostname:
                raise ValueError(f"Invalid endpoint URL: {endpoint_url}")
            self._protocol = f"{parsed.scheme or 'https'}:"
            self._hostname = parsed.hostname
            self._port = parsed.port
            self._base_path = parsed.path.rstrip("/")
            self._path_style = True
        elif force_path_style:
            self._protocol = "https:"
            self._hostname = f"s3.{region}.amazonaws.com"
            self._port = None
            self._base_path = ""
            self._path_style = True
        else:
            self._protocol = "https:"
            self._hostname = f"{bucket}.s3.{region}.amazonaws.com"
            self._port = None
            self._base_path = ""
            self._path_style = False

        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)

    @property
    def signer(self) -> SigV4Signer:
        return self._signer

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def list_objects(self, prefix: str = "") -> list[StoredObjectSummary]:
        """List every object under a prefix.

        Follows continuation tokens until the listing is complete.

        Args:
            prefix: Key prefix to filter by.

        Returns:
            Object summaries in the order returned by the service.

        Raises:
            TransportError: On network failure or an error response.
        """
        objects: list[StoredObjectSummary] = []
        token: str | None = None
        while True:
            query: dict[str, str | list[str] | None] = {"list-type": "2"}
            if prefix:
                query["prefix"] = prefix
            if token:
                query["continuation-token"] = token

            response = self._send(self._request("GET", query=query))
            root = _parse_xml(response.content)
            for contents in _children(root, "Contents"):
                objects.append(_parse_summary(contents))

            token = _child_text(root, "NextContinuationToken")
            if _child_text(root, "IsTruncated") != "true" or not token:
                break

        logger.debug(
            "Listed %d objects in %s (prefix=%r)",
            len(objects),
            self.bucket,
            prefix,
        )
        return objects

    def head_object(self, key: str) -> ObjectMetadata:
        """Fetch object metadata.

        Raises:
            NotFound: If the object does not exist.
            TransportError: On any other failure.
        """
        response = self._send(self._request("HEAD", key), key=key)
        headers = response.headers
        last_modified = None
        if "last-modified" in headers:
            last_modified = parsedate_to_datetime(headers["last-modified"])
        return ObjectMetadata(
            key=key,
            size=int(headers.get("content-length", 0)),
            content_type=headers.get("content-type"),
            etag=_strip_etag(headers.get("etag")),
            last_modified=last_modified,
        )

    def object_exists(self, key: str) -> bool:
        """Check whether an object exists.

        Raises:
            TransportError: On failures other than not-found.
        """
        try:
            self.head_object(key)
        except NotFound:
            return False
        return True

    def put_object(
        self, key: str, body: bytes, content_type: str | None = None
    ) -> None:
        """Upload an object, overwriting any existing one."""
        headers = {}
        if content_type:
            headers["content-type"] = content_type
        self._send(
            self._request("PUT", key, headers=headers, body=body), key=key
        )
        logger.info("Uploaded %s (%d bytes)", key, len(body))

    def delete_object(self, key: str) -> None:
        """Delete an object.  Deleting a missing key succeeds."""
        self._send(self._request("DELETE", key), key=key)
        logger.info("Deleted %s", key)

    def copy_object(self, source_key: str, dest_key: str) -> None:
        """Server-side copy within the bucket.

        Raises:
            NotFound: If the source does not exist.
            TransportError: On any other failure, including an error
                document returned with a 200 status.
        """
        headers = {
            COPY_SOURCE_HEADER: f"/{self.bucket}/{escape_path(source_key)}"
        }
        response = self._send(
            self._request("PUT", dest_key, headers=headers), key=source_key
        )
        if response.content:
            root = _parse_xml(response.content)
            if _local_name(root.tag) == "Error":
                raise TransportError(
                    _child_text(root, "Message") or "Copy failed",
                    status_code=response.status_code,
                    code=_child_text(root, "Code"),
                )
        logger.info("Copied %s to %s", source_key, dest_key)

    def presign_get(
        self,
        key: str,
        expires_in: int = 3600,
        signing_date: SigningDate | None = None,
    ) -> str:
        """Build a presigned GET URL for an object.

        Raises:
            ExpiryTooLarge: If ``expires_in`` exceeds one week.
        """
        request = self._request(
            "GET", key, headers={SHA256_HEADER: UNSIGNED_PAYLOAD}
        )
        presigned = self._signer.presign(
            request, expires_in=expires_in, signing_date=signing_date
        )
        return format_url(presigned)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def object_path(self, key: str | None = None) -> str:
        """Encoded request path for a key, or for the bucket itself."""
        path = self._base_path
        if self._path_style:
            path += f"/{self.bucket}"
        if key is not None:
            path += f"/{escape_path(key)}"
        return path or "/"

    def _request(
        self,
        method: str,
        key: str | None = None,
        *,
        query: dict[str, str | list[str] | None] | None = None,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpRequest:
        return HttpRequest(
            method=method,
            hostname=self._hostname,
            port=self._port,
            protocol=self._protocol,
            path=self.object_path(key),
            query=query or {},
            headers=headers or {},
            body=body,
        )

    def _send(
        self, request: HttpRequest, *, key: str | None = None
    ) -> httpx.Response:
        signed = self._signer.sign_request(request)
        url = format_url(signed)
        try:
            response = self._http.request(
                signed.method,
                url,
                headers=signed.headers,
                content=signed.body,
            )
        except httpx.HTTPError as e:
            raise TransportError(
                f"{signed.method} {signed.path} failed: {e}"
            ) from e

        logger.debug(
            "%s %s -> %d", signed.method, signed.path, response.status_code
        )
        if response.is_success:
            return response
        raise _error_from_response(response, key)


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def _error_from_response(
    response: httpx.Response, key: str | None
) -> TransportError:
    code = None
    message = response.reason_phrase or "Request failed"
    if response.content:
        try:
            root = ET.fromstring(response.content)
        except ET.ParseError:
            root = None
        if root is not None:
            code = _child_text(root, "Code")
            message = _child_text(root, "Message") or message

    if response.status_code == 404 and code in (None, "NoSuchKey"):
        return NotFound(key or "", code=code)
    return TransportError(
        message, status_code=response.status_code, code=code
    )


def _parse_xml(content: bytes) -> ET.Element:
    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        raise TransportError(f"Malformed XML response: {e}") from e


def _local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on tags."""
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _child_text(element: ET.Element, name: str) -> str | None:
    found = _children(element, name)
    return found[0].text if found else None


def _strip_etag(etag: str | None) -> str | None:
    return etag.strip('"') if etag else etag


def _parse_summary(contents: ET.Element) -> StoredObjectSummary:
    last_modified = _child_text(contents, "LastModified")
    return StoredObjectSummary(
        key=_child_text(contents, "Key") or "",
        size=int(_child_text(contents, "Size") or 0),
        last_modified=(
            datetime.fromisoformat(last_modified) if last_modified else None
        ),
        etag=_strip_etag(_child_text(contents, "ETag")),
    )
