# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""File browser HTTP server.

Provides a WSGI application serving the browser page and the JSON API
backing it.
"""

import logging
import threading
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from werkzeug.wrappers.response import StartResponse

from werkzeug.exceptions import MethodNotAllowed, NotFound
from werkzeug.routing import Map, Rule
from werkzeug.serving import make_server
from werkzeug.wrappers import Request, Response

from bucketbrowser.storage import FileManager
from bucketbrowser.web.handlers import RequestHandlers


logger = logging.getLogger(__name__)


class WebServer:
    """WSGI file browser server.

    Runs in a background thread.
    """

    def __init__(
        self,
        manager: FileManager,
        host: str = "127.0.0.1",
        port: int = 5300,
        *,
        folders: tuple[str, ...] | list[str] = (),
        max_upload_bytes: int = 250 * 1024 * 1024,
        download_expiry: int = 3600,
    ) -> None:
        """Initialize the server.

        Args:
            manager: File manager to run operations with.
            host: Host to bind to.
            port: Port to bind to.
            folders: Upload folders offered by the UI.
            max_upload_bytes: Largest accepted upload body.
            download_expiry: Lifetime of download links, in seconds.
        """
        self.manager = manager
        self.host = host
        self.port = port
        self._server: Any = None
        self._thread: threading.Thread | None = None

        self._handlers = RequestHandlers(
            manager,
            bucket=manager.client.bucket,
            folders=folders,
            max_upload_bytes=max_upload_bytes,
            download_expiry=download_expiry,
        )

        self._url_map = Map(
            [
                Rule("/", endpoint="index"),
                Rule("/api/files", endpoint="api_files"),
                Rule("/api/exists", endpoint="api_exists"),
                Rule("/api/upload", endpoint="api_upload", methods=["POST"]),
                Rule("/api/delete", endpoint="api_delete", methods=["POST"]),
                Rule("/api/rename", endpoint="api_rename", methods=["POST"]),
                Rule("/api/download-url", endpoint="api_download_url"),
                Rule("/download/<path:key>", endpoint="download"),
                Rule("/health", endpoint="health"),
            ]
        )

        self._endpoint_handlers = {
            "index": self._handlers.handle_index,
            "api_files": self._handlers.handle_api_files,
            "api_exists": self._handlers.handle_api_exists,
            "api_upload": self._handlers.handle_api_upload,
            "api_delete": self._handlers.handle_api_delete,
            "api_rename": self._handlers.handle_api_rename,
            "api_download_url": self._handlers.handle_api_download_url,
            "download": self._handlers.handle_download,
            "health": self._handlers.handle_health,
        }

    def start(self) -> None:
        """Start the server in a background thread."""
        self._server = make_server(
            self.host,
            self.port,
            self._wsgi_app,
            threaded=True,
        )
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            daemon=True,
            name="WebServer",
        )
        self._thread.start()
        logger.info(
            "File browser started at http://%s:%d/", self.host, self.port
        )

    def stop(self) -> None:
        """Stop the server."""
        if self._server:
            self._server.shutdown()
            self._server = None
            logger.info("File browser stopped")

    def wait(self, timeout: float | None = None) -> None:
        """Block until the server thread exits."""
        if self._thread is not None:
            self._thread.join(timeout)

    def _wsgi_app(
        self,
        environ: dict[str, Any],
        start_response: "StartResponse",
    ) -> Iterable[bytes]:
        """WSGI application entry point."""
        request = Request(environ)
        response = self._dispatch(request)
        return response(environ, start_response)

    def _dispatch(self, request: Request) -> Response:
        """Route request to the matching handler."""
        adapter = self._url_map.bind_to_environ(request.environ)
        try:
            endpoint, values = adapter.match()
            handler = self._endpoint_handlers[endpoint]
            return handler(request, **values)
        except NotFound:
            return Response("Not Found", status=404)
        except MethodNotAllowed as e:
            return e.get_response(request.environ)
        except Exception:
            logger.exception("Error handling request %s", request.path)
            return Response("Internal Server Error", status=500)
