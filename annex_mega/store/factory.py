"""Factory for creating remote stores based on configuration."""

from annex_mega.config import ENV_STORE_DIR, RemoteConfig
from annex_mega.exceptions import ConfigurationError
from annex_mega.store.filesystem import FilesystemStore
from annex_mega.store.protocol import RemoteStore


def create_store(config: RemoteConfig) -> RemoteStore:
    """
    Create the RemoteStore described by ``config``.

    Raises:
        ConfigurationError: If no store directory is configured.
    """
    if config.store_dir is None:
        msg = f"Store directory not set: set {ENV_STORE_DIR}"
        raise ConfigurationError(msg)

    return FilesystemStore(
        config.store_dir,
        config.resolved_trash_dir,
        chunk_size=config.chunk_size,
    )
