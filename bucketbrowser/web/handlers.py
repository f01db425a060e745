# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""HTTP request handlers for the file browser.

Storage failures are logged with their details and reported to the
client only as a generic failure message.
"""

import json
import logging
from typing import Any

from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import redirect
from werkzeug.wrappers import Request, Response

from bucketbrowser.storage import ConflictPolicy, FileManager
from bucketbrowser.web import views
from bucketbrowser.web.formatters import format_last_modified


logger = logging.getLogger(__name__)


def _json(data: Any, status: int = 200) -> Response:
    return Response(
        json.dumps(data),
        status=status,
        content_type="application/json",
        headers={"Cache-Control": "no-cache"},
    )


def _failure(message: str, status: int = 500) -> Response:
    return _json({"success": False, "error": message}, status=status)


class RequestHandlers:
    """Container for HTTP request handlers.

    Encapsulates the file manager and UI settings needed to serve the
    browser page and its JSON API.
    """

    def __init__(
        self,
        manager: FileManager,
        *,
        bucket: str,
        folders: tuple[str, ...] | list[str] = (),
        max_upload_bytes: int = 250 * 1024 * 1024,
        download_expiry: int = 3600,
    ) -> None:
        """Initialize request handlers.

        Args:
            manager: File manager to run operations with.
            bucket: Bucket name shown in the page title.
            folders: Upload folders offered by the UI.
            max_upload_bytes: Largest accepted upload body.
            download_expiry: Lifetime of download links, in seconds.
        """
        self.manager = manager
        self.bucket = bucket
        self.folders = tuple(folders)
        self.max_upload_bytes = max_upload_bytes
        self.download_expiry = download_expiry

    def handle_index(self, request: Request) -> Response:
        """Handle the file browser page.

        The ``folder`` query parameter selects the folder to show.  A
        listing failure still renders the page, with an error in place of
        the listing.
        """
        folder = request.args.get("folder") or None
        try:
            view = self.manager.folder_view(folder)
            error = None
        except Exception:
            logger.exception("Failed to list files for index page")
            view, error = None, "Failed to load files"

        return Response(
            views.render_browser(
                view,
                self.folders,
                self.bucket,
                self.max_upload_bytes,
                error=error,
            ),
            content_type="text/html; charset=utf-8",
        )

    def handle_api_files(self, request: Request) -> Response:
        """Handle JSON listing of every object in the bucket."""
        try:
            files = self.manager.list_files(request.args.get("prefix", ""))
        except Exception:
            logger.exception("Failed to list files")
            return _failure("Failed to list files")

        return _json(
            [
                {
                    "key": f.key,
                    "size": f.size,
                    "lastModified": (
                        format_last_modified(f.last_modified)
                        if f.last_modified
                        else None
                    ),
                }
                for f in files
            ]
        )

    def handle_api_exists(self, request: Request) -> Response:
        """Handle existence check for a key given as ``?name=``."""
        name = request.args.get("name", "")
        if not name:
            return _failure("Missing 'name' parameter", status=400)
        try:
            exists = self.manager.file_exists(name)
        except Exception:
            logger.exception("Failed to check whether %s exists", name)
            return _failure("Failed to check file")
        return _json({"exists": exists})

    def handle_api_upload(self, request: Request) -> Response:
        """Handle a multipart upload.

        Form fields: ``file`` (required), ``folder`` and ``conflict``
        (``increment``, ``timestamp`` or ``replace``).
        """
        if (
            request.content_length is not None
            and request.content_length > self.max_upload_bytes
        ):
            return _failure("File is too large", status=413)

        request.max_content_length = self.max_upload_bytes
        try:
            upload = request.files.get("file")
            folder = request.form.get("folder") or None
            conflict_raw = request.form.get("conflict") or "increment"
        except RequestEntityTooLarge:
            return _failure("File is too large", status=413)

        if upload is None or not upload.filename:
            return _failure("No file provided", status=400)
        try:
            conflict = ConflictPolicy(conflict_raw)
        except ValueError:
            return _failure(
                f"Unknown conflict policy: {conflict_raw}", status=400
            )
        if folder is not None and folder not in self.folders:
            return _failure(f"Unknown folder: {folder}", status=400)

        try:
            result = self.manager.upload(
                upload.filename,
                upload.read(),
                content_type=upload.mimetype or None,
                folder=folder,
                conflict=conflict,
            )
        except ValueError:
            return _failure("Invalid file name", status=400)
        except Exception:
            logger.exception("Upload of %s failed", upload.filename)
            return _failure("Failed to upload file")

        return _json({"success": result.success, "fileName": result.file_name})

    def handle_api_delete(self, request: Request) -> Response:
        """Handle deletion of ``{"key": ...}``."""
        body = request.get_json(silent=True) or {}
        key = body.get("key") if isinstance(body, dict) else None
        if not key or not isinstance(key, str):
            return _failure("Missing 'key'", status=400)
        try:
            result = self.manager.delete(key)
        except Exception:
            logger.exception("Failed to delete %s", key)
            return _failure("Failed to delete")
        return _json({"success": result.success})

    def handle_api_rename(self, request: Request) -> Response:
        """Handle rename of ``{"oldKey": ..., "newKey": ...}``."""
        body = request.get_json(silent=True) or {}
        if not isinstance(body, dict):
            body = {}
        old_key = body.get("oldKey")
        new_key = body.get("newKey")
        if not isinstance(old_key, str) or not isinstance(new_key, str):
            return _failure("Missing 'oldKey' or 'newKey'", status=400)
        try:
            result = self.manager.rename(old_key, new_key)
        except ValueError:
            return _failure("Invalid rename", status=400)
        except Exception:
            logger.exception("Failed to rename %s to %s", old_key, new_key)
            return _failure("Failed to rename")
        return _json({"success": result.success})

    def handle_api_download_url(self, request: Request) -> Response:
        """Handle creation of a presigned download URL for ``?key=``."""
        key = request.args.get("key", "")
        if not key:
            return _failure("Missing 'key' parameter", status=400)
        try:
            url = self.manager.download_url(key, self.download_expiry)
        except Exception:
            logger.exception("Failed to create download URL for %s", key)
            return _failure("Failed to create download link")
        return _json({"url": url})

    def handle_download(self, request: Request, key: str) -> Response:
        """Redirect to a presigned download URL."""
        try:
            url = self.manager.download_url(key, self.download_expiry)
        except Exception:
            logger.exception("Failed to create download URL for %s", key)
            return _failure("Failed to create download link")
        return redirect(url, code=302)

    def handle_health(self, request: Request) -> Response:
        """Handle health check endpoint."""
        return _json({"status": "ok"})
