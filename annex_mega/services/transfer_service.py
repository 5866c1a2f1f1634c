"""
Transfer service for annex keys.

Stores and retrieves keys idempotently: existing remote or local state is
reconciled first and data only moves when no equivalent object exists.
"""

import os
import stat
from collections.abc import Callable
from pathlib import Path

import structlog

from annex_mega.core.progress import ProgressReporter
from annex_mega.exceptions import (
    DirectoryConflictError,
    FileConflictError,
    InvalidDestinationError,
    InvalidPathError,
    InvalidSourceError,
    NotAFileError,
    PathNotFoundError,
)
from annex_mega.models.node import RemoteNode
from annex_mega.models.transfer import Direction, TransferRequest
from annex_mega.services.directory_service import DirectoryService
from annex_mega.services.shard_service import ShardService
from annex_mega.store.protocol import RemoteStore

logger = structlog.get_logger(__name__)


def _has_trailing_separator(path: str) -> bool:
    return path.endswith("/") or path.endswith(os.sep)


class TransferService:
    """
    Moves key content between local files and the remote store.

    Both directions short-circuit once the object is in place, so repeating
    an identical request transfers nothing.
    """

    def __init__(
        self,
        store: RemoteStore,
        directories: DirectoryService,
        shards: ShardService,
        progress: Callable[[], ProgressReporter] | None = None,
    ) -> None:
        """
        Args:
            store: Remote store.
            directories: Directory service over the same store.
            shards: Key to address mapping.
            progress: Builds one progress reporter per transfer. Defaults to a
                reporter that discards its output.
        """
        self._store = store
        self._directories = directories
        self._shards = shards
        self._progress = progress or (lambda: ProgressReporter(lambda _: None))

    async def execute(self, request: TransferRequest) -> None:
        """Run a TRANSFER request in its direction."""
        if request.direction == Direction.STORE:
            await self.store(request.key, request.local_path)
        else:
            await self.retrieve(request.key, request.local_path)

    async def store(self, key: str, local_path: str) -> None:
        """
        Upload ``local_path`` as ``key`` unless it is already stored.

        Args:
            key: Content key.
            local_path: Regular file holding the content.

        Raises:
            InvalidSourceError: If the source is missing or not a regular file.
            FileConflictError: If a same-named object of another size exists.
            NotAFolderError: If a file blocks the shard folder.
            StoreError: If the store fails.
        """
        source = Path(local_path)
        try:
            info = source.stat()
        except OSError as e:
            raise InvalidSourceError(path=local_path) from e
        if not stat.S_ISREG(info.st_mode):
            raise InvalidSourceError(path=local_path)

        address = await self._shards.address_for(key)
        await self._directories.ensure_path(address.parent)

        resolution = await self._directories.resolve(address)
        if resolution.is_complete:
            logger.info("Key already stored", key=key, address=str(address))
            return
        if len(resolution.missing) != 1:
            raise PathNotFoundError(path=str(address.parent))

        parent = resolution.deepest
        name = source.name
        for child in await self._store.list_children(parent):
            if child.name != name:
                continue
            if child.size == info.st_size:
                logger.info("Same file already stored", key=key, name=name)
                return
            raise FileConflictError(path=str(address.parent) + "/" + name)

        async with self._progress() as stream:
            await self._store.upload_file(source, parent, name, stream)
        logger.info("Key stored", key=key, address=str(address), size=info.st_size)

    async def retrieve(self, key: str, local_path: str) -> None:
        """
        Download ``key`` into ``local_path`` unless it is already there.

        Args:
            key: Content key.
            local_path: Destination file, or a directory ending in a separator.

        Raises:
            PathNotFoundError: If the key does not exist remotely.
            NotAFileError: If the key resolves to a folder.
            InvalidDestinationError: If the destination's directory is missing.
            DirectoryConflictError: If a directory occupies the destination.
            FileConflictError: If a local file of another size exists.
            StoreError: If the store fails.
        """
        address = await self._shards.address_for(key)
        if address.is_root:
            raise InvalidPathError(path=str(address))

        resolution = await self._directories.resolve(address)
        if not resolution.is_complete:
            raise PathNotFoundError(path=str(address))
        node = resolution.deepest
        if not node.is_file:
            raise NotAFileError(path=str(address))

        destination = self._destination_for(local_path, address.name, node)
        if destination is None:
            logger.info("Key already retrieved", key=key, destination=local_path)
            return

        async with self._progress() as stream:
            await self._store.download_file(node, destination, stream)
        logger.info("Key retrieved", key=key, destination=str(destination), size=node.size)

    async def check_present(self, key: str) -> bool:
        """
        Check whether ``key`` exists remotely.

        Raises:
            InvalidPathError: If the key address cannot be built.
            StoreError: If the lookup itself fails.
        """
        address = await self._shards.address_for(key)
        resolution = await self._directories.resolve(address)
        return resolution.is_complete

    @staticmethod
    def _destination_for(local_path: str, name: str, node: RemoteNode) -> Path | None:
        """Path to download into, or None when an identical file is already there."""
        path = Path(local_path)
        if not path.exists():
            # A trailing separator names the directory itself, which must exist.
            if _has_trailing_separator(local_path) or not path.parent.is_dir():
                raise InvalidDestinationError(path=local_path)
            return path

        if path.is_dir():
            if not _has_trailing_separator(local_path):
                raise DirectoryConflictError(path=local_path)
            path = path / name
            if not path.exists():
                return path
            if path.is_dir():
                raise DirectoryConflictError(path=str(path))

        if path.stat().st_size == node.size:
            return None
        raise FileConflictError(path=str(path))
