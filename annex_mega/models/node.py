"""
Remote store node models.
"""

from dataclasses import dataclass
from enum import IntEnum


class NodeType(IntEnum):
    """Type of remote node."""

    FOLDER = 1
    FILE = 2


@dataclass(frozen=True, kw_only=True)
class RemoteNode:
    """
    A file or folder in the remote store.

    Owned by the store; the adapter only reads it. All mutation goes through
    store operations.
    """

    handle: str
    name: str
    node_type: NodeType
    size: int = 0
    parent_handle: str | None = None

    @property
    def is_folder(self) -> bool:
        """Check if this node is a folder."""
        return self.node_type == NodeType.FOLDER

    @property
    def is_file(self) -> bool:
        """Check if this node is a file."""
        return self.node_type == NodeType.FILE
