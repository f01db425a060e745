# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""CSS for the file browser page.

The page uses a light theme that switches to dark mode via
``@media (prefers-color-scheme: dark)``.
"""


def _base() -> str:
    """Reset, typography, cards and buttons.

    Returns:
        CSS string (without <style> tags).
    """
    return """\
        * { box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto,
                         "Helvetica Neue", Arial, sans-serif;
            margin: 0;
            padding: 32px;
            background: #f5f5f5;
            color: #333;
        }
        main {
            max-width: 960px;
            margin: 0 auto;
        }
        h1 { font-size: 24px; margin: 0 0 24px; }
        a { color: #337ab7; text-decoration: none; }
        a:hover { text-decoration: underline; }
        .card {
            background: white;
            border-radius: 8px;
            border: 1px solid #e5e5e5;
            box-shadow: 0 1px 3px rgba(0,0,0,0.1);
            margin-bottom: 24px;
        }
        button, .button {
            font: inherit;
            font-size: 14px;
            border: 0;
            border-radius: 6px;
            padding: 8px 16px;
            cursor: pointer;
        }
        button:disabled { background: #aaa; cursor: default; }
        .primary { background: #2563eb; color: white; }
        .danger { background: #dc2626; color: white; }
        .link-button {
            background: none;
            padding: 0;
            font-weight: 600;
            color: #2563eb;
        }
        .link-button.danger { color: #dc2626; }
        .status-message {
            min-height: 20px;
            font-size: 13px;
            margin-top: 8px;
        }
        .status-message.error { color: #dc2626; }
        .status-message.success { color: #16a34a; }"""


def _upload_styles() -> str:
    """Upload form and conflict modal."""
    return """\
        .upload-form {
            display: flex;
            flex-wrap: wrap;
            gap: 16px;
            align-items: center;
            padding: 24px;
            background: #fafafa;
        }
        .upload-form select, .upload-form input[type=file] {
            font-size: 14px;
            padding: 6px;
            border: 1px solid #ddd;
            border-radius: 4px;
            background: white;
        }
        .modal-backdrop {
            position: fixed;
            inset: 0;
            background: rgba(0,0,0,0.7);
            display: none;
            align-items: center;
            justify-content: center;
            padding: 16px;
            z-index: 50;
        }
        .modal-backdrop.open { display: flex; }
        .modal {
            background: white;
            border-radius: 8px;
            padding: 24px;
            max-width: 360px;
            width: 100%;
            text-align: center;
        }
        .modal h2 { font-size: 20px; margin: 0 0 8px; }
        .modal-actions {
            display: flex;
            flex-direction: column;
            gap: 8px;
            margin-top: 24px;
        }"""


def _listing_styles() -> str:
    """Breadcrumb, folder rows and file rows."""
    return """\
        .breadcrumb {
            display: flex;
            gap: 8px;
            align-items: center;
            padding: 16px;
            border-bottom: 1px solid #e5e5e5;
            font-size: 14px;
            font-weight: 500;
        }
        .breadcrumb .separator { color: #999; }
        .breadcrumb .current {
            font-size: 12px;
            font-weight: 700;
            padding: 2px 8px;
            border-radius: 4px;
            background: #e5e5e5;
        }
        .entries { list-style: none; margin: 0; padding: 0; }
        .entry {
            display: flex;
            justify-content: space-between;
            align-items: center;
            gap: 12px;
            padding: 16px;
            border-bottom: 1px solid #eee;
        }
        .entry:last-child { border-bottom: 0; }
        .entry:hover { background: #fafafa; }
        .entry-name { display: flex; align-items: center; gap: 12px; }
        .entry-icon { font-size: 20px; }
        .entry-size { display: block; font-size: 12px; color: #777; }
        .entry-actions { display: flex; gap: 16px; }
        .folder-link { font-weight: 500; color: inherit; }
        .empty {
            padding: 32px;
            text-align: center;
            color: #777;
        }"""


def _dark_mode_overrides() -> str:
    """``prefers-color-scheme: dark`` overrides.

    Returns:
        CSS string wrapped in a ``@media`` query.
    """
    return """\
        @media (prefers-color-scheme: dark) {
            body { background: #1a1a1a; color: #d4d4d4; }
            a { color: #6db3f2; }
            .card { background: #252526; border-color: #333; }
            .upload-form { background: #1f1f1f; }
            .upload-form select, .upload-form input[type=file] {
                background: #2d2d2d;
                border-color: #444;
                color: #d4d4d4;
            }
            .modal { background: #2d2d2d; }
            .breadcrumb { border-color: #333; }
            .breadcrumb .current { background: #3a3a3a; }
            .entry { border-color: #333; }
            .entry:hover { background: #2a2a2a; }
            .link-button { color: #6db3f2; }
            .link-button.danger { color: #f87171; }
        }"""


def browser_styles() -> str:
    """Complete CSS for the file browser page.

    Returns:
        CSS string (without <style> tags).
    """
    return "\n".join(
        [
            _base(),
            _upload_styles(),
            _listing_styles(),
            _dark_mode_overrides(),
        ]
    )
