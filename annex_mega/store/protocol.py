"""
Remote store protocol definition.

This defines the interface of the object store the adapter talks to, allowing
different implementations (mounted tree, SDK client, test double) to be
swapped without changing the rest of the codebase.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from annex_mega.core.progress import ProgressStream
from annex_mega.models.node import RemoteNode


@runtime_checkable
class RemoteStore(Protocol):
    """
    Abstract interface for the remote hierarchical object store.

    Implementations own authentication, transport and retries. Failures are
    raised as StoreError (or a subclass) unless stated otherwise.
    """

    @property
    def root(self) -> RemoteNode:
        """Primary root node. Only valid after login."""
        ...

    @property
    def trash(self) -> RemoteNode:
        """Trash root node. Only valid after login."""
        ...

    async def login(self, username: str, password: str) -> None:
        """
        Open a session.

        Raises:
            AuthenticationError: If the credentials are rejected.
        """
        ...

    async def resolve(self, parent: RemoteNode, segments: Sequence[str]) -> list[RemoteNode]:
        """
        Look a path up below ``parent``.

        Args:
            parent: Node the lookup starts from.
            segments: Names to follow, in order.

        Returns:
            Matched nodes ordered from shallowest to deepest. The list is
            shorter than ``segments`` when the lookup stops at a missing name.
        """
        ...

    async def list_children(self, node: RemoteNode) -> list[RemoteNode]:
        """List the direct children of a folder."""
        ...

    async def create_directory(self, name: str, parent: RemoteNode) -> RemoteNode:
        """Create a folder named ``name`` inside ``parent`` and return it."""
        ...

    async def upload_file(
        self,
        local_path: Path,
        parent: RemoteNode,
        name: str,
        progress: ProgressStream,
    ) -> RemoteNode:
        """
        Upload a local file into ``parent`` under ``name``.

        Each chunk moved is reported on ``progress``. The caller closes the
        stream.
        """
        ...

    async def download_file(
        self,
        node: RemoteNode,
        local_path: Path,
        progress: ProgressStream,
    ) -> None:
        """
        Download a file node to ``local_path``.

        Each chunk moved is reported on ``progress``. The caller closes the
        stream.
        """
        ...

    async def close(self) -> None:
        """Release the session."""
        ...
