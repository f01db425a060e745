# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Signing key derivation and per-signer key cache."""

import hashlib
import hmac
import threading
from collections import OrderedDict

from bucketbrowser.signing.constants import KEY_TYPE_IDENTIFIER, MAX_CACHE_SIZE
from bucketbrowser.signing.types import Credential


def hmac_sha256(key: bytes, msg: str | bytes) -> bytes:
    """HMAC-SHA256 helper."""
    if isinstance(msg, str):
        msg = msg.encode("utf-8")
    return hmac.new(key, msg, hashlib.sha256).digest()


def derive_signing_key(
    secret_key: str, short_date: str, region: str, service: str
) -> bytes:
    """Derive the SigV4 signing key.

    Args:
        secret_key: Secret access key.
        short_date: Date string (YYYYMMDD).
        region: Region name.
        service: Service name.

    Returns:
        Derived signing key bytes.
    """
    k_date = hmac_sha256(("AWS4" + secret_key).encode("utf-8"), short_date)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, KEY_TYPE_IDENTIFIER)


class SigningKeyCache:
    """Bounded FIFO cache of derived signing keys.

    Entries are keyed by scope plus an HMAC of the access key ID under the
    secret, so the cache never holds the secret itself in its keys.  When
    full, the oldest inserted entry is evicted.  Thread-safe.
    """

    def __init__(self, max_size: int = MAX_CACHE_SIZE) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self._max_size = max_size
        self._entries: OrderedDict[str, bytes] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @staticmethod
    def cache_key(
        credential: Credential, short_date: str, region: str, service: str
    ) -> str:
        """Build the cache key for a credential and scope."""
        fingerprint = hmac_sha256(
            credential.secret_access_key.encode("utf-8"),
            credential.access_key_id,
        ).hex()
        token = credential.session_token or ""
        return f"{short_date}:{region}:{service}:{fingerprint}:{token}"

    def get_signing_key(
        self, credential: Credential, short_date: str, region: str, service: str
    ) -> bytes:
        """Return the signing key for a scope, deriving it on a miss.

        Args:
            credential: Credential to derive from.
            short_date: Date string (YYYYMMDD).
            region: Region name.
            service: Service name.

        Returns:
            Derived signing key bytes.
        """
        key = self.cache_key(credential, short_date, region, service)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                return cached

        signing_key = derive_signing_key(
            credential.secret_access_key, short_date, region, service
        )

        with self._lock:
            self._entries[key] = signing_key
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)
        return signing_key

    def clear(self) -> None:
        """Drop every cached key."""
        with self._lock:
            self._entries.clear()
