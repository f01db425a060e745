# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Object storage subsystem.

Provides:
- A signed S3 client over httpx (ObjectStoreClient)
- File operations with upload conflict handling (FileManager)
- Folder grouping of flat listings
"""

from bucketbrowser.storage.client import (
    ObjectMetadata,
    ObjectStoreClient,
    StoredObjectSummary,
)
from bucketbrowser.storage.errors import (
    CollisionLimitExceeded,
    NotFound,
    PartialRenameError,
    StorageError,
    TransportError,
)
from bucketbrowser.storage.manager import (
    ConflictPolicy,
    FileManager,
    FolderView,
    OperationResult,
    UploadResult,
    group_by_folder,
)


__all__ = [
    "CollisionLimitExceeded",
    "ConflictPolicy",
    "FileManager",
    "FolderView",
    "NotFound",
    "ObjectMetadata",
    "ObjectStoreClient",
    "OperationResult",
    "PartialRenameError",
    "StorageError",
    "StoredObjectSummary",
    "TransportError",
    "UploadResult",
    "group_by_folder",
]
