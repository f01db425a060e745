# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Exceptions raised by the request signer."""


class SigningError(Exception):
    """Base exception for signing failures."""


class InvalidCredentials(SigningError):
    """Resolved credentials are incomplete or expired."""


class ExpiryTooLarge(SigningError):
    """Presign lifetime exceeds the one-week maximum."""

    def __init__(self, expires_in: int, maximum: int) -> None:
        super().__init__(
            f"Presigned URLs must expire within {maximum} seconds "
            f"(got {expires_in})"
        )
        self.expires_in = expires_in
        self.maximum = maximum


class UnsupportedSigningTarget(SigningError):
    """The object passed to ``sign`` is not a known signing target."""
