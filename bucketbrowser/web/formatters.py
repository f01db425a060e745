# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Formatting utilities for the file browser views."""

import math
from datetime import datetime


_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_size(size: int | None) -> str:
    """Format a byte count in binary units.

    Values are rounded to two decimals with trailing zeros dropped.
    Sizes beyond the largest unit stay in GB.

    Args:
        size: Size in bytes, or None.

    Returns:
        Formatted string like "1.5 KB", or "-" if None.
    """
    if size is None or size < 0:
        return "-"
    if size == 0:
        return "0 Bytes"

    index = min(int(math.log(size, 1024)), len(_SIZE_UNITS) - 1)
    # Guard against float error just below a power of 1024
    if index + 1 < len(_SIZE_UNITS) and size >= 1024 ** (index + 1):
        index += 1
    value = f"{size / 1024**index:.2f}".rstrip("0").rstrip(".")
    return f"{value} {_SIZE_UNITS[index]}"


def format_last_modified(value: datetime | None) -> str:
    """Format an object's modification time as ISO 8601, or "-"."""
    if value is None:
        return "-"
    return value.isoformat()
