# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""AWS Signature Version 4 signer.

Signs HTTP requests with an ``Authorization`` header, presigns requests
by moving the signature into the query string, and signs raw strings and
event-stream messages with chained signatures.

The signer never mutates the request it is given; every operation works
on a clone and returns it.
"""

import hashlib
import hmac
import logging
from collections.abc import Callable, Collection
from datetime import UTC, datetime

from bucketbrowser.signing.canonical import (
    build_canonical_request,
    build_string_to_sign,
    canonical_headers,
    canonical_path,
    canonical_query_string,
    create_scope,
    format_date,
    payload_hash,
    signed_header_list,
)
from bucketbrowser.signing.constants import (
    ALGORITHM_IDENTIFIER,
    ALGORITHM_QUERY_PARAM,
    AMZ_DATE_HEADER,
    AMZ_DATE_QUERY_PARAM,
    AUTH_HEADER,
    CREDENTIAL_QUERY_PARAM,
    EVENT_ALGORITHM_IDENTIFIER,
    EXPIRES_QUERY_PARAM,
    GENERATED_HEADERS,
    HOISTABLE_PREFIX,
    HOST_HEADER,
    MAX_CACHE_SIZE,
    MAX_PRESIGNED_TTL,
    SHA256_HEADER,
    SIGNATURE_QUERY_PARAM,
    SIGNED_HEADERS_QUERY_PARAM,
    TOKEN_HEADER,
    TOKEN_QUERY_PARAM,
    UNSIGNED_PAYLOAD,
)
from bucketbrowser.signing.errors import (
    ExpiryTooLarge,
    InvalidCredentials,
    UnsupportedSigningTarget,
)
from bucketbrowser.signing.event_headers import encode_headers
from bucketbrowser.signing.key_cache import SigningKeyCache
from bucketbrowser.signing.types import (
    Credential,
    EventMessage,
    EventToSign,
    HttpRequest,
    MessageToSign,
    RequestToSign,
    SignedMessage,
    StringToSign,
    SignTarget,
)
from bucketbrowser.signing.url import format_url


logger = logging.getLogger(__name__)

#: A signing date: datetime, epoch seconds, or numeric / ISO 8601 string.
SigningDate = datetime | int | float | str

CredentialSource = Credential | Callable[[], Credential]


class SigV4Signer:
    """Signs requests for one service and default region.

    Args:
        service: Service name used in the credential scope (e.g. ``s3``).
        region: Default region used in the credential scope.
        credentials: A credential, or a callable returning one.  Callables
            are invoked on every signing operation.
        uri_escape_path: Normalize and escape request paths.  S3 requires
            False; its object keys are pre-encoded by the caller.
        apply_checksum: Add ``x-amz-content-sha256`` to signed requests.
        cache_size: Number of derived signing keys to keep.
    """

    def __init__(
        self,
        service: str,
        region: str,
        credentials: CredentialSource,
        *,
        uri_escape_path: bool = True,
        apply_checksum: bool = True,
        cache_size: int = MAX_CACHE_SIZE,
    ) -> None:
        self.service = service
        self.region = region
        self.uri_escape_path = uri_escape_path
        self.apply_checksum = apply_checksum
        self._credentials = credentials
        self._key_cache = SigningKeyCache(cache_size)

    @property
    def key_cache(self) -> SigningKeyCache:
        return self._key_cache

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def sign(
        self,
        target: SignTarget,
        *,
        signing_date: SigningDate | None = None,
        region: str | None = None,
        service: str | None = None,
    ) -> str | SignedMessage | HttpRequest:
        """Sign any supported target.

        Args:
            target: One of ``StringToSign``, ``EventToSign``,
                ``MessageToSign`` or ``RequestToSign``.
            signing_date: Signing time (default: now).
            region: Region override.
            service: Service override.

        Returns:
            A hex signature for strings and events, a ``SignedMessage`` for
            messages, or the signed request.

        Raises:
            UnsupportedSigningTarget: If the target is of another type.
        """
        if isinstance(target, StringToSign):
            return self.sign_string(
                target.value,
                signing_date=signing_date,
                region=region,
                service=service,
            )
        if isinstance(target, EventToSign):
            return self.sign_event(
                target.headers,
                target.payload,
                target.prior_signature,
                signing_date=signing_date,
                region=region,
                service=service,
            )
        if isinstance(target, MessageToSign):
            return self.sign_message(
                target.message,
                target.prior_signature,
                signing_date=signing_date,
                region=region,
                service=service,
            )
        if isinstance(target, RequestToSign):
            return self.sign_request(
                target.request,
                signing_date=signing_date,
                region=region,
                service=service,
            )
        raise UnsupportedSigningTarget(
            f"Cannot sign object of type {type(target).__name__}"
        )

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def sign_request(
        self,
        request: HttpRequest,
        *,
        signing_date: SigningDate | None = None,
        region: str | None = None,
        service: str | None = None,
        signable_headers: Collection[str] | None = None,
        unsignable_headers: Collection[str] | None = None,
    ) -> HttpRequest:
        """Sign a request with an ``Authorization`` header.

        Args:
            request: Request to sign.  Not modified.
            signing_date: Signing time (default: now).
            region: Region override.
            service: Service override.
            signable_headers: Lower-case header names to sign even if they
                are normally unsignable.
            unsignable_headers: Lower-case header names to leave unsigned.

        Returns:
            Signed copy of the request.

        Raises:
            InvalidCredentials: If the credential is missing a key or expired.
            UnsupportedSigningTarget: If ``request`` is not an
                ``HttpRequest``.
        """
        _require_request(request)
        credential = self._resolve_credentials()
        signed = self._prepare(request)
        long_date, short_date = format_date(_now_if_none(signing_date))
        scope = create_scope(
            short_date, region or self.region, service or self.service
        )

        signed.headers[AMZ_DATE_HEADER] = long_date
        if credential.session_token:
            signed.headers[TOKEN_HEADER] = credential.session_token

        body_hash = signed.get_header(SHA256_HEADER)
        if body_hash is None:
            body_hash = payload_hash(signed.headers, signed.body)
            if self.apply_checksum:
                signed.headers[SHA256_HEADER] = body_hash

        headers = canonical_headers(
            signed.headers, unsignable_headers, signable_headers
        )
        signature = self._signature(
            credential,
            long_date,
            scope,
            self._canonical_request(signed, headers, body_hash),
            region or self.region,
            service or self.service,
        )

        signed.headers[AUTH_HEADER] = (
            f"{ALGORITHM_IDENTIFIER} "
            f"Credential={credential.access_key_id}/{scope}, "
            f"SignedHeaders={signed_header_list(headers)}, "
            f"Signature={signature}"
        )
        logger.debug(
            "Signed %s %s (scope=%s, headers=%s)",
            signed.method,
            signed.path,
            scope,
            signed_header_list(headers),
        )
        return signed

    def presign(
        self,
        request: HttpRequest,
        *,
        expires_in: int = 3600,
        signing_date: SigningDate | None = None,
        region: str | None = None,
        service: str | None = None,
        signable_headers: Collection[str] | None = None,
        unsignable_headers: Collection[str] | None = None,
        hoistable_headers: Collection[str] | None = None,
        unhoistable_headers: Collection[str] | None = None,
    ) -> HttpRequest:
        """Presign a request by placing the signature in the query string.

        Headers prefixed with ``x-amz-`` (and any named in
        ``hoistable_headers``) are moved into the query before signing.

        Args:
            request: Request to presign.  Not modified.
            expires_in: URL lifetime in seconds (at most one week).
            signing_date: Signing time (default: now).
            region: Region override.
            service: Service override.
            signable_headers: Lower-case header names to sign even if they
                are normally unsignable.
            unsignable_headers: Lower-case header names to leave unsigned.
            hoistable_headers: Lower-case header names to move to the query.
            unhoistable_headers: Lower-case ``x-amz-*`` names to keep as
                headers.

        Returns:
            Presigned copy of the request.

        Raises:
            InvalidCredentials: If the credential is missing a key or expired.
            ExpiryTooLarge: If ``expires_in`` exceeds one week.
            UnsupportedSigningTarget: If ``request`` is not an
                ``HttpRequest``.
        """
        _require_request(request)
        credential = self._resolve_credentials()
        long_date, short_date = format_date(_now_if_none(signing_date))
        if expires_in > MAX_PRESIGNED_TTL:
            raise ExpiryTooLarge(expires_in, MAX_PRESIGNED_TTL)

        region = region or self.region
        service = service or self.service
        scope = create_scope(short_date, region, service)

        presigned = _hoist_headers(
            self._prepare(request), hoistable_headers, unhoistable_headers
        )
        if credential.session_token:
            presigned.query[TOKEN_QUERY_PARAM] = credential.session_token
        presigned.query[ALGORITHM_QUERY_PARAM] = ALGORITHM_IDENTIFIER
        presigned.query[CREDENTIAL_QUERY_PARAM] = (
            f"{credential.access_key_id}/{scope}"
        )
        presigned.query[AMZ_DATE_QUERY_PARAM] = long_date
        presigned.query[EXPIRES_QUERY_PARAM] = str(expires_in)

        headers = canonical_headers(
            presigned.headers, unsignable_headers, signable_headers
        )
        presigned.query[SIGNED_HEADERS_QUERY_PARAM] = signed_header_list(
            headers
        )

        body_hash = payload_hash(
            request.headers, request.body, absent=UNSIGNED_PAYLOAD
        )
        presigned.query[SIGNATURE_QUERY_PARAM] = self._signature(
            credential,
            long_date,
            scope,
            self._canonical_request(presigned, headers, body_hash),
            region,
            service,
        )
        logger.debug(
            "Presigned %s %s (scope=%s, expires_in=%d)",
            presigned.method,
            presigned.path,
            scope,
            expires_in,
        )
        return presigned

    # ------------------------------------------------------------------
    # Strings and event streams
    # ------------------------------------------------------------------

    def sign_string(
        self,
        value: str,
        *,
        signing_date: SigningDate | None = None,
        region: str | None = None,
        service: str | None = None,
    ) -> str:
        """Sign a precomputed string with the scope's signing key.

        Returns:
            Hex-encoded HMAC-SHA256 signature.
        """
        credential = self._resolve_credentials()
        _, short_date = format_date(_now_if_none(signing_date))
        key = self._key_cache.get_signing_key(
            credential,
            short_date,
            region or self.region,
            service or self.service,
        )
        return hmac.new(key, value.encode("utf-8"), hashlib.sha256).hexdigest()

    def sign_event(
        self,
        headers: bytes,
        payload: bytes,
        prior_signature: str,
        *,
        signing_date: SigningDate | None = None,
        region: str | None = None,
        service: str | None = None,
    ) -> str:
        """Sign an encoded event chained to the previous signature.

        Args:
            headers: Binary-encoded event headers.
            payload: Event payload.
            prior_signature: Hex signature of the previous event (or of
                the initial request).
            signing_date: Signing time (default: now).
            region: Region override.
            service: Service override.

        Returns:
            Hex-encoded signature.
        """
        signing_date = _now_if_none(signing_date)
        long_date, short_date = format_date(signing_date)
        scope = create_scope(
            short_date, region or self.region, service or self.service
        )
        string_to_sign = "\n".join(
            [
                EVENT_ALGORITHM_IDENTIFIER,
                long_date,
                scope,
                prior_signature,
                hashlib.sha256(headers).hexdigest(),
                payload_hash({}, payload),
            ]
        )
        return self.sign_string(
            string_to_sign,
            signing_date=signing_date,
            region=region,
            service=service,
        )

    def sign_message(
        self,
        message: EventMessage,
        prior_signature: str,
        *,
        signing_date: SigningDate | None = None,
        region: str | None = None,
        service: str | None = None,
    ) -> SignedMessage:
        """Sign an event-stream message chained to the previous signature."""
        signature = self.sign_event(
            encode_headers(message.headers),
            message.body,
            prior_signature,
            signing_date=signing_date,
            region=region,
            service=service,
        )
        return SignedMessage(message=message, signature=signature)

    @staticmethod
    def format_url(request: HttpRequest) -> str:
        """Render a (presigned) request as an absolute URL."""
        return format_url(request)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_credentials(self) -> Credential:
        credential = self._credentials
        if callable(credential):
            credential = credential()
        if (
            not isinstance(credential, Credential)
            or not credential.access_key_id
            or not credential.secret_access_key
        ):
            raise InvalidCredentials(
                "Credentials must include an access key ID and secret"
            )
        if credential.is_expired:
            raise InvalidCredentials(
                f"Credentials expired at {credential.expiration}"
            )
        return credential

    @staticmethod
    def _prepare(request: HttpRequest) -> HttpRequest:
        """Clone a request, drop generated headers and ensure ``host``."""
        prepared = request.clone()
        for name in GENERATED_HEADERS:
            prepared.delete_header(name)
        if not prepared.has_header(HOST_HEADER):
            prepared.headers[HOST_HEADER] = prepared.authority
        return prepared

    def _canonical_request(
        self,
        request: HttpRequest,
        headers: dict[str, str],
        body_hash: str,
    ) -> str:
        return build_canonical_request(
            request.method,
            canonical_path(request.path, uri_escape_path=self.uri_escape_path),
            canonical_query_string(request.query),
            headers,
            body_hash,
        )

    def _signature(
        self,
        credential: Credential,
        long_date: str,
        scope: str,
        canonical_request: str,
        region: str,
        service: str,
    ) -> str:
        string_to_sign = build_string_to_sign(
            ALGORITHM_IDENTIFIER, long_date, scope, canonical_request
        )
        key = self._key_cache.get_signing_key(
            credential, long_date[:8], region, service
        )
        return hmac.new(
            key, string_to_sign.encode("utf-8"), hashlib.sha256
        ).hexdigest()


def _now_if_none(signing_date: SigningDate | None) -> SigningDate:
    return datetime.now(UTC) if signing_date is None else signing_date


def _require_request(request: object) -> None:
    if not isinstance(request, HttpRequest):
        raise UnsupportedSigningTarget(
            f"Expected HttpRequest, got {type(request).__name__}"
        )


def _hoist_headers(
    request: HttpRequest,
    hoistable: Collection[str] | None,
    unhoistable: Collection[str] | None,
) -> HttpRequest:
    """Move ``x-amz-*`` and explicitly hoistable headers into the query."""
    for name in list(request.headers):
        lname = name.lower()
        if (
            lname.startswith(HOISTABLE_PREFIX)
            and not (unhoistable is not None and lname in unhoistable)
        ) or (hoistable is not None and lname in hoistable):
            request.query[name] = request.headers.pop(name)
    return request
