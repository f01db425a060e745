# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""HTML fragments for the file browser page.

Upload form, conflict modal, breadcrumb, folder and file listings, and
the client-side script that drives them through the JSON API.
"""

import html
import json
from urllib.parse import quote

from bucketbrowser.storage import FolderView, StoredObjectSummary
from bucketbrowser.web.formatters import format_size


def render_upload_form(folders: tuple[str, ...] | list[str]) -> str:
    """Render the upload form with its folder selector.

    Args:
        folders: Upload folders to offer.  An extra "(root)" option
            uploads to the top level.

    Returns:
        HTML string for the upload card.
    """
    options = ['<option value="">(root)</option>']
    for folder in folders:
        escaped = html.escape(folder)
        options.append(f'<option value="{escaped}">{escaped}</option>')

    return f"""
    <div class="card">
        <form class="upload-form" id="upload-form">
            <select id="upload-folder" name="folder">
                {"".join(options)}
            </select>
            <input type="file" id="upload-file" name="file">
            <button type="submit" class="primary" id="upload-btn">
                Upload
            </button>
        </form>
        <div class="status-message" id="upload-status"></div>
    </div>"""


def render_conflict_modal() -> str:
    """Render the dialog shown when an upload name is already taken."""
    return """
    <div class="modal-backdrop" id="conflict-modal">
        <div class="modal">
            <h2>File Already Exists</h2>
            <p><b id="conflict-name"></b> is already in the bucket.</p>
            <div class="modal-actions">
                <button class="primary" data-conflict="timestamp">
                    Keep Both (Rename)
                </button>
                <button class="danger" data-conflict="replace">
                    Replace Existing
                </button>
                <button class="link-button" data-conflict="cancel">
                    Cancel
                </button>
            </div>
        </div>
    </div>"""


def render_breadcrumb(folder: str | None) -> str:
    """Render the Home / folder breadcrumb.

    Args:
        folder: Current folder, or None at the root.

    Returns:
        HTML string for the breadcrumb bar.
    """
    current = ""
    if folder:
        current = f"""
            <span class="separator">/</span>
            <span class="current">{html.escape(folder)}</span>"""
    return f"""
        <div class="breadcrumb">
            <a href="/">Home</a>{current}
        </div>"""


def render_folder_entry(folder: str) -> str:
    """Render one folder row linking to its listing."""
    href = f"/?folder={quote(folder, safe='')}"
    return f"""
            <li class="entry folder">
                <a class="entry-name folder-link" href="{html.escape(href)}">
                    <span class="entry-icon">📁</span>
                    <span>{html.escape(folder)}</span>
                </a>
            </li>"""


def render_file_entry(item: StoredObjectSummary, folder: str | None) -> str:
    """Render one file row with its actions.

    Inside a folder only the last path segment is shown.

    Args:
        item: Listed object.
        folder: Current folder, or None at the root.

    Returns:
        HTML string for the file row.
    """
    display_name = item.key.rsplit("/", 1)[-1] if folder else item.key
    name = html.escape(display_name)
    key_attr = html.escape(item.key)
    download_href = html.escape(f"/download/{quote(item.key)}")
    return f"""
            <li class="entry file" data-key="{key_attr}">
                <div class="entry-name">
                    <span class="entry-icon">📄</span>
                    <div>
                        <span class="file-name">{name}</span>
                        <span class="entry-size">{format_size(item.size)}</span>
                    </div>
                </div>
                <div class="entry-actions">
                    <a class="link-button" href="{download_href}"
                       target="_blank" rel="noopener">Download</a>
                    <button class="link-button" data-action="rename"
                            data-key="{key_attr}">Rename</button>
                    <button class="link-button danger" data-action="delete"
                            data-key="{key_attr}">Delete</button>
                </div>
            </li>"""


def render_listing(view: FolderView) -> str:
    """Render the folder and file list for one level.

    Args:
        view: Grouped listing.

    Returns:
        HTML string for the listing card.
    """
    rows = [render_folder_entry(folder) for folder in view.folders]
    rows.extend(render_file_entry(item, view.folder) for item in view.files)
    if view.is_empty:
        rows.append('<li class="empty">Folder is empty</li>')

    return f"""
    <div class="card">
        {render_breadcrumb(view.folder)}
        <ul class="entries">{"".join(rows)}
        </ul>
        <div class="status-message" id="list-status"></div>
    </div>"""


def render_error_card(message: str) -> str:
    """Render a listing placeholder for when the bucket cannot be read."""
    return f"""
    <div class="card">
        {render_breadcrumb(None)}
        <div class="empty">{html.escape(message)}</div>
    </div>"""


def browser_script(max_upload_bytes: int) -> str:
    """Render the client-side script for uploads and file actions.

    Args:
        max_upload_bytes: Largest upload the server accepts.

    Returns:
        HTML script tag.
    """
    return f"""
    <script>
        var MAX_UPLOAD_BYTES = {json.dumps(max_upload_bytes)};
        var pendingFile = null;

        function setStatus(id, text, kind) {{
            var el = document.getElementById(id);
            el.textContent = text;
            el.className = 'status-message' + (kind ? ' ' + kind : '');
        }}

        function postJson(url, body) {{
            return fetch(url, {{
                method: 'POST',
                headers: {{'Content-Type': 'application/json'}},
                body: JSON.stringify(body)
            }}).then(function(response) {{
                return response.json();
            }});
        }}

        function targetKey(file) {{
            var folder = document.getElementById('upload-folder').value;
            return folder ? folder + '/' + file.name : file.name;
        }}

        function sendUpload(conflict) {{
            var btn = document.getElementById('upload-btn');
            var data = new FormData();
            data.append('file', pendingFile);
            var folder = document.getElementById('upload-folder');
            data.append('folder', folder.value);
            data.append('conflict', conflict);

            btn.disabled = true;
            btn.textContent = 'Uploading...';
            fetch('/api/upload', {{method: 'POST', body: data}})
            .then(function(response) {{
                return response.json();
            }})
            .then(function(result) {{
                if (result.success) {{
                    window.location.reload();
                }} else {{
                    var msg = result.error || 'Upload failed';
                    setStatus('upload-status', msg, 'error');
                }}
            }})
            .catch(function(error) {{
                setStatus('upload-status', 'Error: ' + error, 'error');
            }})
            .finally(function() {{
                btn.disabled = false;
                btn.textContent = 'Upload';
            }});
        }}

        var uploadForm = document.getElementById('upload-form');
        uploadForm.addEventListener('submit', function(event) {{
            event.preventDefault();
            var input = document.getElementById('upload-file');
            pendingFile = input.files.length ? input.files[0] : null;
            if (!pendingFile) {{
                setStatus(
                    'upload-status', 'Please select a file first', 'error'
                );
                return;
            }}
            if (pendingFile.size > MAX_UPLOAD_BYTES) {{
                setStatus('upload-status', 'File is too large', 'error');
                return;
            }}
            var name = encodeURIComponent(targetKey(pendingFile));
            fetch('/api/exists?name=' + name)
            .then(function(response) {{
                return response.json();
            }})
            .then(function(result) {{
                if (result.exists) {{
                    var modal = document.getElementById('conflict-modal');
                    document.getElementById('conflict-name').textContent =
                        pendingFile.name;
                    modal.classList.add('open');
                }} else {{
                    sendUpload('increment');
                }}
            }})
            .catch(function(error) {{
                setStatus('upload-status', 'Error: ' + error, 'error');
            }});
        }});

        document.querySelectorAll('[data-conflict]').forEach(function(btn) {{
            btn.addEventListener('click', function() {{
                var modal = document.getElementById('conflict-modal');
                modal.classList.remove('open');
                var choice = btn.getAttribute('data-conflict');
                if (choice !== 'cancel') {{
                    sendUpload(choice);
                }}
            }});
        }});

        document.querySelectorAll('[data-action=delete]')
        .forEach(function(btn) {{
            btn.addEventListener('click', function() {{
                var key = btn.getAttribute('data-key');
                if (!confirm('Delete ' + key + '?')) {{
                    return;
                }}
                postJson('/api/delete', {{key: key}}).then(function(result) {{
                    if (result.success) {{
                        window.location.reload();
                    }} else {{
                        var msg = result.error || 'Failed to delete';
                        setStatus('list-status', msg, 'error');
                    }}
                }});
            }});
        }});

        document.querySelectorAll('[data-action=rename]')
        .forEach(function(btn) {{
            btn.addEventListener('click', function() {{
                var oldKey = btn.getAttribute('data-key');
                var newKey = prompt('New name for ' + oldKey, oldKey);
                if (!newKey || newKey === oldKey) {{
                    return;
                }}
                postJson('/api/rename', {{oldKey: oldKey, newKey: newKey}})
                .then(function(result) {{
                    if (result.success) {{
                        window.location.reload();
                    }} else {{
                        var msg = result.error || 'Failed to rename';
                        setStatus('list-status', msg, 'error');
                    }}
                }});
            }});
        }});
    </script>"""
