# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for bucketbrowser/signing/types.py."""

from datetime import UTC, datetime, timedelta

from bucketbrowser.signing import Credential, HttpRequest


class TestCredential:
    """Tests for Credential."""

    def test_without_expiration_never_expires(self) -> None:
        assert Credential("AKID", "secret").is_expired is False

    def test_past_expiration(self) -> None:
        past = datetime.now(UTC) - timedelta(minutes=1)
        assert Credential("AKID", "secret", expiration=past).is_expired

    def test_future_expiration(self) -> None:
        future = datetime.now(UTC) + timedelta(hours=1)
        credential = Credential("AKID", "secret", expiration=future)
        assert credential.is_expired is False


class TestHttpRequestHeaders:
    """Case-insensitive header helpers on HttpRequest."""

    def test_get_header(self) -> None:
        """Lookups ignore the stored name's casing."""
        request = HttpRequest(
            method="GET", hostname="h", headers={"Content-Type": "text/plain"}
        )
        assert request.get_header("content-type") == "text/plain"
        assert request.get_header("CONTENT-TYPE") == "text/plain"
        assert request.get_header("x-missing") is None

    def test_has_header(self) -> None:
        request = HttpRequest(method="GET", hostname="h", headers={"Host": "h"})
        assert request.has_header("host")
        assert not request.has_header("date")

    def test_delete_header_removes_all_casings(self) -> None:
        request = HttpRequest(
            method="GET",
            hostname="h",
            headers={"X-Amz-Date": "a", "x-amz-date": "b", "Host": "h"},
        )
        request.delete_header("X-AMZ-DATE")
        assert request.headers == {"Host": "h"}

    def test_clone_is_independent(self) -> None:
        """Cloned header and query mappings do not alias the original."""
        request = HttpRequest(
            method="GET",
            hostname="h",
            query={"a": ["1", "2"]},
            headers={"Host": "h"},
        )
        copy = request.clone()
        copy.headers["X-Extra"] = "1"
        copy.query["a"].append("3")  # type: ignore[union-attr]
        assert request.get_header("x-extra") is None
        assert request.query == {"a": ["1", "2"]}
