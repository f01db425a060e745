# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""AWS Signature Version 4 request signing.

Provides:
- Header-based request signing and query-string presigning (SigV4Signer)
- String, event and event-stream message signing
- Canonical request helpers and a bounded signing key cache
"""

from bucketbrowser.signing.errors import (
    ExpiryTooLarge,
    InvalidCredentials,
    SigningError,
    UnsupportedSigningTarget,
)
from bucketbrowser.signing.key_cache import SigningKeyCache, derive_signing_key
from bucketbrowser.signing.signer import SigV4Signer
from bucketbrowser.signing.types import (
    Credential,
    EventHeader,
    EventMessage,
    EventToSign,
    HttpRequest,
    MessageToSign,
    RequestToSign,
    SignedMessage,
    SignTarget,
    StringToSign,
)
from bucketbrowser.signing.url import format_url


__all__ = [
    "Credential",
    "EventHeader",
    "EventMessage",
    "EventToSign",
    "ExpiryTooLarge",
    "HttpRequest",
    "InvalidCredentials",
    "MessageToSign",
    "RequestToSign",
    "SigV4Signer",
    "SignTarget",
    "SignedMessage",
    "SigningError",
    "SigningKeyCache",
    "StringToSign",
    "UnsupportedSigningTarget",
    "derive_signing_key",
    "format_url",
]
