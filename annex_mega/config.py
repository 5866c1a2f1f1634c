"""
annex-mega configuration.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Self

from annex_mega.exceptions import ConfigurationError

ENV_STORE_DIR = "MEGA_ANNEX_STORE_DIR"
ENV_TRASH_DIR = "MEGA_ANNEX_TRASH_DIR"
ENV_LOG_LEVEL = "MEGA_ANNEX_LOG_LEVEL"
ENV_PROGRESS_INTERVAL = "MEGA_ANNEX_PROGRESS_INTERVAL"


@dataclass(frozen=True, kw_only=True)
class RemoteConfig:
    """
    Attributes:
        annex_version: Protocol version announced on startup.
        progress_interval: Seconds of silence after which progress is re-emitted.
        chunk_size: Bytes copied per step by the filesystem store.
        username_env: Environment variable holding the username for INITREMOTE.
        password_env: Environment variable holding the password for INITREMOTE.
        store_dir: Directory where the MEGA tree is mounted.
        trash_dir: Directory used as the trash root. Defaults to ``<store_dir>/.trash``.
        log_level: Minimum level written to stderr.
    """

    annex_version: int = 1
    progress_interval: float = 10.0
    chunk_size: int = 64 * 1024
    username_env: str = "MEGA_USERNAME"
    password_env: str = "MEGA_PASSWORD"
    store_dir: Path | None = None
    trash_dir: Path | None = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.progress_interval <= 0:
            msg = "progress_interval must be positive"
            raise ConfigurationError(msg)
        if self.chunk_size <= 0:
            msg = "chunk_size must be positive"
            raise ConfigurationError(msg)
        if self.log_level.upper() not in logging.getLevelNamesMapping():
            msg = f"unknown log level: {self.log_level}"
            raise ConfigurationError(msg)

    @property
    def resolved_trash_dir(self) -> Path | None:
        """Trash directory, falling back to a folder inside the store."""
        if self.trash_dir is not None:
            return self.trash_dir
        if self.store_dir is not None:
            return self.store_dir / ".trash"
        return None

    @classmethod
    def from_env(cls) -> Self:
        """Build a configuration from ``MEGA_ANNEX_*`` environment variables."""
        kwargs: dict[str, object] = {}
        if store_dir := os.environ.get(ENV_STORE_DIR):
            kwargs["store_dir"] = Path(store_dir).expanduser()
        if trash_dir := os.environ.get(ENV_TRASH_DIR):
            kwargs["trash_dir"] = Path(trash_dir).expanduser()
        if log_level := os.environ.get(ENV_LOG_LEVEL):
            kwargs["log_level"] = log_level.upper()
        if interval := os.environ.get(ENV_PROGRESS_INTERVAL):
            try:
                kwargs["progress_interval"] = float(interval)
            except ValueError as e:
                msg = f"{ENV_PROGRESS_INTERVAL} must be a number"
                raise ConfigurationError(msg, value=interval) from e
        return cls(**kwargs)
