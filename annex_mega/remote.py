"""
annex-mega special remote facade.

This is the main entry point for running the adapter. It wires the channel,
the session service and the dispatcher together.
"""

from collections.abc import Callable
from typing import Self, TextIO

import structlog

from annex_mega.config import RemoteConfig
from annex_mega.logging_config import ensure_logging_configured
from annex_mega.protocol.channel import AnnexChannel, LineReader, open_stdin_reader
from annex_mega.protocol.dispatcher import Dispatcher
from annex_mega.services.session_service import SessionService
from annex_mega.store.factory import create_store
from annex_mega.store.protocol import RemoteStore

logger = structlog.get_logger(__name__)


class AnnexRemote:
    """
    Special remote speaking the line protocol over a reader and a writer.

    Example:
        ```python
        async with AnnexRemote(RemoteConfig.from_env()) as remote:
            await remote.run()
        ```

    Unless the host application configured structlog, logging is routed to
    stderr when the remote starts, keeping stdout for protocol lines.

    Args:
        config: Adapter configuration. Uses defaults if not provided.
        reader: Inbound lines. Defaults to stdin.
        writer: Outbound lines. Defaults to stdout.
        store_factory: Builds the remote store at PREPARE time.
    """

    def __init__(
        self,
        config: RemoteConfig | None = None,
        *,
        reader: LineReader | None = None,
        writer: TextIO | None = None,
        store_factory: Callable[[RemoteConfig], RemoteStore] = create_store,
    ) -> None:
        self._config = config or RemoteConfig()
        self._reader = reader
        self._writer = writer
        self._store_factory = store_factory
        self._dispatcher: Dispatcher | None = None

    async def __aenter__(self) -> Self:
        await self._ensure_initialized()
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        await self.close()

    @property
    def dispatcher(self) -> Dispatcher | None:
        return self._dispatcher

    async def run(self) -> None:
        """Serve the driver until it closes the channel."""
        dispatcher = await self._ensure_initialized()
        await dispatcher.run()

    async def close(self) -> None:
        """Close the store session, if one was opened."""
        if self._dispatcher is not None:
            await self._dispatcher.close()
            self._dispatcher = None
            logger.debug("Remote closed")

    async def _ensure_initialized(self) -> Dispatcher:
        if self._dispatcher is not None:
            return self._dispatcher

        ensure_logging_configured(self._config.log_level)
        reader = self._reader if self._reader is not None else await open_stdin_reader()
        channel = AnnexChannel(reader, self._writer)
        sessions = SessionService(channel, self._config, self._store_factory)
        self._dispatcher = Dispatcher(channel, self._config, sessions)
        logger.debug("Remote initialized")
        return self._dispatcher
