"""
Session service for annex-mega.

Handles the PREPARE bootstrap and INITREMOTE credential setup.
"""

import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

import structlog

from annex_mega.config import RemoteConfig
from annex_mega.core.paths import parse_address
from annex_mega.exceptions import MegaAnnexError, SessionError
from annex_mega.models.address import Root
from annex_mega.models.node import RemoteNode
from annex_mega.protocol.channel import AnnexChannel
from annex_mega.protocol.messages import get_config, get_credentials, set_credentials
from annex_mega.services.directory_service import DirectoryService
from annex_mega.store.factory import create_store
from annex_mega.store.protocol import RemoteStore

logger = structlog.get_logger(__name__)


class SessionState(StrEnum):
    """Lifecycle of the process-wide session."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dataclass(frozen=True, kw_only=True)
class Session:
    """
    Authenticated store handle and the settings fetched at bootstrap.

    Attributes:
        store: Logged-in remote store.
        root: Primary root node.
        trash: Trash root node.
        folder: Working folder under the primary root.
        encryption: Encryption setting as reported by the driver.
    """

    store: RemoteStore
    root: RemoteNode
    trash: RemoteNode
    folder: str
    encryption: str = ""


class SessionService:
    """
    Creates the session exactly once per process.

    A failed bootstrap leaves the service uninitialized so PREPARE can be
    attempted again; a successful one can never be repeated.
    """

    def __init__(
        self,
        channel: AnnexChannel,
        config: RemoteConfig,
        store_factory: Callable[[RemoteConfig], RemoteStore] = create_store,
    ) -> None:
        """
        Args:
            channel: Channel to the driver.
            config: Adapter configuration.
            store_factory: Builds the remote store for a configuration.
        """
        self._channel = channel
        self._config = config
        self._store_factory = store_factory
        self._state = SessionState.UNINITIALIZED
        self._session: Session | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Session | None:
        return self._session

    async def prepare(self) -> Session:
        """
        Bootstrap the session.

        Fetches the encryption and folder settings and the stored
        credentials, logs in and makes sure the working folder exists.

        Returns:
            The new session.

        Raises:
            SessionError: If a session already exists, credentials or folder
                are missing, or login fails.
            ConfigurationError: If no store can be built.
            MegaAnnexError: If the folder cannot be materialized.
        """
        if self._state == SessionState.READY:
            msg = "mega instance is not nil"
            raise SessionError(msg)

        encryption = await get_config(self._channel, "encryption")
        folder = await get_config(self._channel, "folder")

        if (credentials := await get_credentials(self._channel)) is None:
            msg = "Couldn't fetch credentials"
            raise SessionError(msg)
        if not folder:
            msg = "Folder isn't set"
            raise SessionError(msg)

        folder_address = parse_address(f"{Root.PRIMARY}:/{folder}")
        store = self._store_factory(self._config)
        username, password = credentials
        try:
            await store.login(username, password)
        except Exception as e:
            await store.close()
            reason = e.message if isinstance(e, MegaAnnexError) else str(e)
            msg = f"Couldn't log in! (Reason: {reason})"
            raise SessionError(msg) from e

        try:
            await DirectoryService(store).ensure_path(folder_address)
        except Exception:
            await store.close()
            raise

        self._session = Session(
            store=store,
            root=store.root,
            trash=store.trash,
            folder=folder,
            encryption=encryption,
        )
        self._state = SessionState.READY
        logger.info("Session ready", folder=folder, user=username)
        return self._session

    def init_remote(self) -> None:
        """
        Hand credentials from the environment to the driver for storage.

        Raises:
            SessionError: If either environment variable is unset or empty.
        """
        username = os.getenv(self._config.username_env)
        password = os.getenv(self._config.password_env)
        if not username or not password:
            msg = (
                "Username and/or password isn't set. Set them with "
                f'{self._config.username_env}="username" {self._config.password_env}="password"'
            )
            raise SessionError(msg)

        set_credentials(self._channel, username, password)
        logger.info("Credentials handed to driver", user=username)

    async def close(self) -> None:
        """Close the store session, if any. The state stays READY."""
        if self._session is not None:
            await self._session.store.close()
