# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Web interface for browsing and managing bucket contents."""

from bucketbrowser.web.formatters import format_size
from bucketbrowser.web.server import WebServer


__all__ = [
    "WebServer",
    "format_size",
]
