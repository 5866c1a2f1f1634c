"""
annex-mega: a git-annex special remote storing keys in MEGA.

Keys are placed under a configured working folder, sharded by the directory
hash git-annex computes, and transferred only when no equivalent object exists.

Example:
    ```python
    from pathlib import Path

    from annex_mega import AnnexRemote, RemoteConfig

    async with AnnexRemote(RemoteConfig(store_dir=Path("/mnt/mega"))) as remote:
        await remote.run()
    ```
"""

from annex_mega.config import RemoteConfig
from annex_mega.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DirectoryConflictError,
    FileConflictError,
    InvalidDestinationError,
    InvalidPathError,
    InvalidSourceError,
    MegaAnnexError,
    NotAFileError,
    NotAFolderError,
    PathError,
    PathNotFoundError,
    ProtocolError,
    SessionError,
    StoreError,
    TransferError,
)
from annex_mega.models import Address, Direction, NodeType, RemoteNode, Root, TransferRequest
from annex_mega.remote import AnnexRemote

__version__ = "0.1.0"

__all__ = [
    # Main entry
    "AnnexRemote",
    "RemoteConfig",
    # Models
    "Address",
    "Direction",
    "NodeType",
    "RemoteNode",
    "Root",
    "TransferRequest",
    # Exceptions
    "MegaAnnexError",
    "ConfigurationError",
    "SessionError",
    "AuthenticationError",
    "ProtocolError",
    "StoreError",
    "PathError",
    "InvalidPathError",
    "PathNotFoundError",
    "NotAFileError",
    "NotAFolderError",
    "TransferError",
    "InvalidSourceError",
    "InvalidDestinationError",
    "FileConflictError",
    "DirectoryConflictError",
]
