# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Shared fixtures for web tests."""

from unittest.mock import MagicMock

import pytest
from werkzeug.test import Client

from bucketbrowser.storage import FileManager, FolderView
from bucketbrowser.web import WebServer


@pytest.fixture
def manager() -> MagicMock:
    """Mock file manager for a bucket named ``test-bucket``."""
    mock = MagicMock(spec=FileManager)
    mock.client.bucket = "test-bucket"
    mock.folder_view.return_value = FolderView(folder=None)
    return mock


@pytest.fixture
def server(manager: MagicMock) -> WebServer:
    return WebServer(
        manager,
        folders=("images", "documents"),
        max_upload_bytes=1024,
        download_expiry=600,
    )


@pytest.fixture
def client(server: WebServer) -> Client:
    return Client(server._wsgi_app)
