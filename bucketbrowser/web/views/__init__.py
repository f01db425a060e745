# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""HTML rendering for the file browser.

This package is split into modules by concern:
    - ``styles``: page CSS
    - ``components``: reusable HTML fragments and the client script
    - ``browser``: the file browser page
"""

from bucketbrowser.web.views.browser import render_browser
from bucketbrowser.web.views.components import (
    render_breadcrumb,
    render_file_entry,
    render_folder_entry,
    render_listing,
    render_upload_form,
)


__all__ = [
    "render_breadcrumb",
    "render_browser",
    "render_file_entry",
    "render_folder_entry",
    "render_listing",
    "render_upload_form",
]
