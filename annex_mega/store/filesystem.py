"""
Remote store backed by a directory tree.

Drives a MEGA account exposed on the local filesystem (FUSE or WebDAV mount of
the cloud drive), or a plain directory in tests. Nodes are addressed by their
absolute path.
"""

import asyncio
import os
import uuid
from collections.abc import Sequence
from pathlib import Path

import structlog

from annex_mega.core.progress import ProgressStream
from annex_mega.exceptions import AuthenticationError, StoreError
from annex_mega.models.node import NodeType, RemoteNode

logger = structlog.get_logger(__name__)

# Names that never match a child on lookup and cannot be created.
_RESERVED_NAMES = frozenset({"", ".", ".."})


def _to_node(path: Path) -> RemoteNode:
    stat = path.stat()
    is_dir = path.is_dir()
    return RemoteNode(
        handle=str(path),
        name=path.name,
        node_type=NodeType.FOLDER if is_dir else NodeType.FILE,
        size=0 if is_dir else stat.st_size,
        parent_handle=str(path.parent),
    )


def _is_valid_name(name: str) -> bool:
    return name not in _RESERVED_NAMES and "/" not in name and os.sep not in name


class FilesystemStore:
    """Directory-tree implementation of the RemoteStore protocol."""

    def __init__(
        self,
        root_dir: Path,
        trash_dir: Path,
        *,
        chunk_size: int = 64 * 1024,
    ) -> None:
        """
        Args:
            root_dir: Directory acting as the primary root.
            trash_dir: Directory acting as the trash root. Created on login.
            chunk_size: Bytes copied per step during transfers.
        """
        self._root_dir = Path(root_dir)
        self._trash_dir = Path(trash_dir)
        self._chunk_size = chunk_size
        self._root: RemoteNode | None = None
        self._trash: RemoteNode | None = None

    @property
    def root(self) -> RemoteNode:
        if self._root is None:
            msg = "Not logged in"
            raise StoreError(msg)
        return self._root

    @property
    def trash(self) -> RemoteNode:
        if self._trash is None:
            msg = "Not logged in"
            raise StoreError(msg)
        return self._trash

    async def login(self, username: str, password: str) -> None:
        """
        Open the mounted tree.

        The mount itself carries the account session, so credentials are only
        checked for presence.

        Raises:
            AuthenticationError: If credentials are empty or the mount is missing.
        """
        if not username or not password:
            msg = "Empty username or password"
            raise AuthenticationError(msg)
        if not self._root_dir.is_dir():
            msg = "Store directory is not available"
            raise AuthenticationError(msg, path=str(self._root_dir))

        try:
            self._trash_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Cannot open trash: {e}"
            raise AuthenticationError(msg, path=str(self._trash_dir)) from e

        self._root = _to_node(self._root_dir)
        self._trash = _to_node(self._trash_dir)
        logger.debug("Logged in", root=str(self._root_dir), user=username)

    async def resolve(self, parent: RemoteNode, segments: Sequence[str]) -> list[RemoteNode]:
        nodes: list[RemoteNode] = []
        current = Path(parent.handle)
        for name in segments:
            if not current.is_dir() or not _is_valid_name(name):
                break
            candidate = current / name
            if not candidate.exists():
                break
            try:
                node = _to_node(candidate)
            except OSError as e:
                msg = f"Lookup failed: {e}"
                raise StoreError(msg, path=str(candidate)) from e
            nodes.append(node)
            current = candidate
        return nodes

    async def list_children(self, node: RemoteNode) -> list[RemoteNode]:
        try:
            return [_to_node(child) for child in sorted(Path(node.handle).iterdir())]
        except OSError as e:
            msg = f"Cannot list folder: {e}"
            raise StoreError(msg, path=node.handle) from e

    async def create_directory(self, name: str, parent: RemoteNode) -> RemoteNode:
        if not _is_valid_name(name):
            msg = f"Invalid folder name: {name!r}"
            raise StoreError(msg, path=parent.handle)

        path = Path(parent.handle) / name
        try:
            path.mkdir()
        except OSError as e:
            msg = f"Cannot create folder: {e}"
            raise StoreError(msg, path=str(path)) from e

        logger.debug("Folder created", path=str(path))
        return _to_node(path)

    async def upload_file(
        self,
        local_path: Path,
        parent: RemoteNode,
        name: str,
        progress: ProgressStream,
    ) -> RemoteNode:
        if not _is_valid_name(name):
            msg = f"Invalid file name: {name!r}"
            raise StoreError(msg, path=parent.handle)

        destination = Path(parent.handle) / name
        try:
            await self._copy(Path(local_path), destination, progress)
        except OSError as e:
            msg = f"Upload failed: {e}"
            raise StoreError(msg, path=str(destination)) from e

        logger.info("File uploaded", source=str(local_path), destination=str(destination))
        return _to_node(destination)

    async def download_file(
        self,
        node: RemoteNode,
        local_path: Path,
        progress: ProgressStream,
    ) -> None:
        if not node.is_file:
            msg = "Node is not a file"
            raise StoreError(msg, path=node.handle)

        try:
            await self._copy(Path(node.handle), Path(local_path), progress)
        except OSError as e:
            msg = f"Download failed: {e}"
            raise StoreError(msg, path=node.handle) from e

        logger.info("File downloaded", source=node.handle, destination=str(local_path))

    async def close(self) -> None:
        self._root = None
        self._trash = None

    async def _copy(self, source: Path, destination: Path, progress: ProgressStream) -> None:
        # Partial copies never show up under the final name.
        partial = destination.with_name(f".{destination.name}.{uuid.uuid4().hex}.part")
        try:
            with source.open("rb") as src, partial.open("wb") as dst:
                while chunk := await asyncio.to_thread(src.read, self._chunk_size):
                    await asyncio.to_thread(dst.write, chunk)
                    progress.send(len(chunk))
            partial.replace(destination)
        finally:
            partial.unlink(missing_ok=True)
