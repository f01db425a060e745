# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""User-level file operations on top of the object store client.

Upload resolves name conflicts according to a ``ConflictPolicy``.  Rename
is a copy followed by a delete and is not atomic: when the delete fails
the copy is left in place and ``PartialRenameError`` is raised.
"""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum

from bucketbrowser.storage.client import ObjectStoreClient, StoredObjectSummary
from bucketbrowser.storage.errors import (
    CollisionLimitExceeded,
    PartialRenameError,
    StorageError,
)
from bucketbrowser.storage.naming import (
    candidate_names,
    join_key,
    timestamped_name,
)


logger = logging.getLogger(__name__)

#: Default number of names probed before an upload gives up.
DEFAULT_MAX_COLLISION_ATTEMPTS = 100

#: Default lifetime of download links, in seconds.
DEFAULT_DOWNLOAD_EXPIRY = 3600


class ConflictPolicy(Enum):
    """How an upload handles an existing object with the same name."""

    INCREMENT = "increment"
    TIMESTAMP = "timestamp"
    REPLACE = "replace"


@dataclass(frozen=True)
class UploadResult:
    success: bool
    file_name: str


@dataclass(frozen=True)
class OperationResult:
    success: bool


@dataclass(frozen=True)
class FolderView:
    """Listing as shown at one level of the folder hierarchy.

    Attributes:
        folder: Current folder, or None at the root.
        folders: Sorted unique top-level folder names (root only).
        files: Objects displayed at this level.
    """

    folder: str | None
    folders: list[str] = field(default_factory=list)
    files: list[StoredObjectSummary] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.folders and not self.files


def group_by_folder(
    files: Iterable[StoredObjectSummary], folder: str | None = None
) -> FolderView:
    """Group a flat listing into folders and files for one level.

    At the root, folders are the first segments of keys containing ``/``
    and files are the keys without ``/``.  Inside a folder, files are all
    keys starting with ``folder/``.

    Args:
        files: Flat listing.
        folder: Folder to view, or None for the root.

    Returns:
        The grouped view.
    """
    files = list(files)
    folder = (folder or "").strip("/") or None
    if folder is None:
        folders = sorted({f.key.split("/", 1)[0] for f in files if "/" in f.key})
        root_files = [f for f in files if "/" not in f.key]
        return FolderView(folder=None, folders=folders, files=root_files)

    prefix = f"{folder}/"
    return FolderView(
        folder=folder,
        files=[f for f in files if f.key.startswith(prefix)],
    )


class FileManager:
    """File operations against one bucket.

    Args:
        client: Object store client.
        max_collision_attempts: Names probed before an INCREMENT upload
            raises ``CollisionLimitExceeded``.
        download_expiry: Default lifetime of download URLs, in seconds.
        clock: Returns the current time in epoch seconds.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        *,
        max_collision_attempts: int = DEFAULT_MAX_COLLISION_ATTEMPTS,
        download_expiry: int = DEFAULT_DOWNLOAD_EXPIRY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_collision_attempts < 1:
            raise ValueError(
                "max_collision_attempts must be positive, "
                f"got {max_collision_attempts}"
            )
        self._client = client
        self._max_collision_attempts = max_collision_attempts
        self._download_expiry = download_expiry
        self._clock = clock

    @property
    def client(self) -> ObjectStoreClient:
        return self._client

    def list_files(self, prefix: str = "") -> list[StoredObjectSummary]:
        return self._client.list_objects(prefix)

    def file_exists(self, name: str) -> bool:
        return self._client.object_exists(name)

    def upload(
        self,
        file_name: str,
        data: bytes,
        *,
        content_type: str | None = None,
        folder: str | None = None,
        conflict: ConflictPolicy = ConflictPolicy.INCREMENT,
    ) -> UploadResult:
        """Upload a file, resolving name conflicts.

        Args:
            file_name: Name of the uploaded file (no path separators).
            data: File contents.
            content_type: MIME type to store with the object.
            folder: Optional folder to upload into.
            conflict: Conflict resolution policy.

        Returns:
            Result carrying the key the file was stored under.

        Raises:
            ValueError: If the file name is empty or contains ``/``.
            CollisionLimitExceeded: If no free name was found.
            TransportError: If a probe or the upload fails.
        """
        if not file_name or "/" in file_name:
            raise ValueError(f"Invalid file name: {file_name!r}")

        if conflict is ConflictPolicy.TIMESTAMP:
            millis = int(self._clock() * 1000)
            key = join_key(folder, timestamped_name(file_name, millis))
        elif conflict is ConflictPolicy.REPLACE:
            key = join_key(folder, file_name)
        else:
            key = self._free_key(folder, file_name)

        self._client.put_object(key, data, content_type=content_type)
        logger.info("Stored upload %r as %s", file_name, key)
        return UploadResult(success=True, file_name=key)

    def delete(self, key: str) -> OperationResult:
        self._client.delete_object(key)
        return OperationResult(success=True)

    def rename(self, old_key: str, new_key: str) -> OperationResult:
        """Rename an object by copying it and deleting the original.

        Raises:
            ValueError: If the keys are empty or identical.
            PartialRenameError: If the copy succeeded but the delete failed.
            TransportError: If the copy failed (nothing changed).
        """
        if not old_key or not new_key:
            raise ValueError("Both keys are required")
        if old_key == new_key:
            raise ValueError(f"Cannot rename {old_key!r} to itself")

        self._client.copy_object(old_key, new_key)
        try:
            self._client.delete_object(old_key)
        except StorageError as e:
            logger.warning(
                "Rename of %s to %s left the original in place: %s",
                old_key,
                new_key,
                e,
            )
            raise PartialRenameError(old_key, new_key) from e
        return OperationResult(success=True)

    def download_url(self, key: str, expires_in: int | None = None) -> str:
        if expires_in is None:
            expires_in = self._download_expiry
        return self._client.presign_get(key, expires_in=expires_in)

    def folder_view(self, folder: str | None = None) -> FolderView:
        """List the bucket and group it for display."""
        return group_by_folder(self.list_files(), folder)

    def _free_key(self, folder: str | None, file_name: str) -> str:
        attempts = 0
        for candidate in candidate_names(file_name):
            if attempts >= self._max_collision_attempts:
                break
            attempts += 1
            key = join_key(folder, candidate)
            if not self._client.object_exists(key):
                return key
            logger.debug("Upload name %s is taken", key)
        raise CollisionLimitExceeded(join_key(folder, file_name), attempts)
