# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""File browser page view."""

import html

from bucketbrowser.storage import FolderView
from bucketbrowser.web.views.components import (
    browser_script,
    render_conflict_modal,
    render_error_card,
    render_listing,
    render_upload_form,
)
from bucketbrowser.web.views.styles import browser_styles


def render_browser(
    view: FolderView | None,
    folders: tuple[str, ...] | list[str],
    bucket: str,
    max_upload_bytes: int,
    error: str | None = None,
) -> str:
    """Render the file browser page.

    Args:
        view: Grouped listing for the current folder, or None if the
            listing could not be loaded.
        folders: Upload folders offered in the form.
        bucket: Bucket name shown in the title.
        max_upload_bytes: Largest upload the server accepts.
        error: Message shown instead of the listing when ``view`` is None.

    Returns:
        HTML string for the page.
    """
    if view is None:
        listing = render_error_card(error or "Failed to load files")
    else:
        listing = render_listing(view)

    title = f"File Manager: {bucket}"
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    <style>
        {browser_styles()}
    </style>
</head>
<body>
<main>
    <h1>{html.escape(title)}</h1>
    {render_upload_form(folders)}
    {listing}
    {render_conflict_modal()}
</main>
    {browser_script(max_upload_bytes)}
</body>
</html>"""
