# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Object name helpers for uploads."""

from collections.abc import Iterator


def split_extension(name: str) -> tuple[str, str]:
    """Split a file name at its last dot.

    >>> split_extension("report.final.pdf")
    ('report.final', '.pdf')
    >>> split_extension("README")
    ('README', '')
    """
    dot = name.rfind(".")
    if dot == -1:
        return name, ""
    return name[:dot], name[dot:]


def numbered_name(name: str, counter: int) -> str:
    """Insert ``(counter)`` before the extension: ``a.txt`` -> ``a(1).txt``."""
    base, ext = split_extension(name)
    return f"{base}({counter}){ext}"


def timestamped_name(name: str, millis: int) -> str:
    """Insert ``_millis`` before the extension: ``a.txt`` -> ``a_123.txt``."""
    base, ext = split_extension(name)
    return f"{base}_{millis}{ext}"


def candidate_names(name: str) -> Iterator[str]:
    """Yield ``name`` followed by ``name(1)``, ``name(2)``, ..."""
    yield name
    counter = 1
    while True:
        yield numbered_name(name, counter)
        counter += 1


def join_key(folder: str | None, name: str) -> str:
    """Prefix a file name with a folder, if any."""
    folder = (folder or "").strip("/")
    return f"{folder}/{name}" if folder else name
