"""
Remote object store interface and implementations.
"""

from annex_mega.store.factory import create_store
from annex_mega.store.filesystem import FilesystemStore
from annex_mega.store.protocol import RemoteStore

__all__ = [
    "FilesystemStore",
    "RemoteStore",
    "create_store",
]
