# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for bucketbrowser/web/server.py."""

import json
from unittest.mock import MagicMock, patch

from werkzeug.test import Client

from bucketbrowser.web import WebServer


class TestRouting:
    """Tests for request dispatch."""

    def test_health(self, client: Client) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert json.loads(response.get_data(as_text=True)) == {"status": "ok"}

    def test_unknown_path(self, client: Client) -> None:
        response = client.get("/nope")
        assert response.status_code == 404

    def test_handler_error_is_500(self, server: WebServer) -> None:
        """Unexpected handler exceptions become a plain 500."""
        server._endpoint_handlers["health"] = MagicMock(
            side_effect=RuntimeError("boom")
        )
        response = Client(server._wsgi_app).get("/health")
        assert response.status_code == 500
        assert "boom" not in response.get_data(as_text=True)

    def test_bucket_from_manager(self, server: WebServer) -> None:
        """The page title uses the manager's bucket."""
        html = Client(server._wsgi_app).get("/").get_data(as_text=True)
        assert "File Manager: test-bucket" in html


class TestLifecycle:
    """Tests for start and stop."""

    def test_start_and_stop(self, manager: MagicMock) -> None:
        """start() serves on a daemon thread; stop() shuts it down."""
        server = WebServer(manager, host="0.0.0.0", port=8080)
        with patch("bucketbrowser.web.server.make_server") as mock_make:
            fake = mock_make.return_value
            server.start()
            server.wait(timeout=1)
            server.stop()

        mock_make.assert_called_once_with(
            "0.0.0.0", 8080, server._wsgi_app, threaded=True
        )
        fake.serve_forever.assert_called_once()
        fake.shutdown.assert_called_once()

    def test_stop_without_start(self, manager: MagicMock) -> None:
        """stop() before start() is a no-op."""
        WebServer(manager).stop()
