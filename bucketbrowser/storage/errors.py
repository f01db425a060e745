# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Exceptions raised by the object store client and file manager."""


class StorageError(Exception):
    """Base exception for storage operations."""


class TransportError(StorageError):
    """Network failure or non-success response from the object store.

    Attributes:
        status_code: HTTP status, or None when no response was received.
        code: Error code from the S3 error document, if any.
        message: Error message from the S3 error document, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        parts = [message]
        if status_code is not None:
            parts.append(f"status={status_code}")
        if code:
            parts.append(f"code={code}")
        super().__init__(" ".join(parts))
        self.status_code = status_code
        self.code = code
        self.message = message


class NotFound(TransportError):
    """The requested object does not exist."""

    def __init__(self, key: str, *, code: str | None = "NoSuchKey") -> None:
        super().__init__(f"Object not found: {key}", status_code=404, code=code)
        self.key = key


class CollisionLimitExceeded(StorageError):
    """No free object name was found within the probe limit."""

    def __init__(self, key: str, attempts: int) -> None:
        super().__init__(
            f"No free name for {key!r} after {attempts} attempts"
        )
        self.key = key
        self.attempts = attempts


class PartialRenameError(StorageError):
    """A rename copied the object but failed to delete the original.

    Both keys exist afterwards; nothing is rolled back.
    """

    def __init__(self, old_key: str, new_key: str) -> None:
        super().__init__(
            f"Copied {old_key!r} to {new_key!r} but could not delete "
            f"{old_key!r}"
        )
        self.old_key = old_key
        self.new_key = new_key
