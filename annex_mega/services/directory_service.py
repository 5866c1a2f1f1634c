"""
Directory service for the remote tree.

Resolves addresses against the store and materializes missing folders.
"""

import structlog

from annex_mega.exceptions import NotAFolderError
from annex_mega.models.address import Address, Resolution, Root
from annex_mega.models.node import RemoteNode
from annex_mega.store.protocol import RemoteStore

logger = structlog.get_logger(__name__)


class DirectoryService:
    """Looks paths up and creates the folders that are missing on them."""

    def __init__(self, store: RemoteStore) -> None:
        """
        Args:
            store: Remote store holding the tree.
        """
        self._store = store

    def root_for(self, address: Address) -> RemoteNode:
        """Root node an address starts from."""
        if address.root == Root.TRASH:
            return self._store.trash
        return self._store.root

    async def resolve(self, address: Address) -> Resolution:
        """
        Look an address up.

        Args:
            address: Address to resolve.

        Returns:
            Resolution with the matched prefix of nodes. The root address
            resolves completely without asking the store.
        """
        root = self.root_for(address)
        if address.is_root:
            return Resolution(address=address, root=root)

        nodes = await self._store.resolve(root, address.segments)
        return Resolution(address=address, root=root, nodes=tuple(nodes))

    async def ensure_path(self, address: Address) -> RemoteNode:
        """
        Make sure every segment of ``address`` exists as a folder.

        Existing folders are left alone, so calling this twice creates
        nothing the second time.

        Args:
            address: Folder address to materialize.

        Returns:
            The folder node at ``address``.

        Raises:
            NotAFolderError: If a file occupies one of the segments.
            StoreError: If the store fails to look up or create a folder.
        """
        resolution = await self.resolve(address)
        current = resolution.deepest

        if not current.is_folder:
            raise NotAFolderError(path=str(address))
        if resolution.is_complete:
            return current

        for name in resolution.missing:
            current = await self._store.create_directory(name, current)
            logger.debug("Folder created", name=name, address=str(address))

        return current
