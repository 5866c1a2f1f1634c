"""
Command dispatcher for the special remote protocol.

Reads one instruction per line and answers with one or more response lines.
Commands run strictly one after another; a failing command never stops the
loop.
"""

from collections.abc import Awaitable, Callable
from functools import partial

import structlog

from annex_mega.config import RemoteConfig
from annex_mega.core.progress import ProgressReporter
from annex_mega.exceptions import MegaAnnexError, ProtocolError, SessionError
from annex_mega.models.transfer import Direction, TransferRequest
from annex_mega.protocol.channel import AnnexChannel
from annex_mega.protocol.messages import send_progress
from annex_mega.services.directory_service import DirectoryService
from annex_mega.services.session_service import Session, SessionService
from annex_mega.services.shard_service import ShardService
from annex_mega.services.transfer_service import TransferService

logger = structlog.get_logger(__name__)

Handler = Callable[[str], Awaitable[None]]


def _reason(error: BaseException) -> str:
    if isinstance(error, MegaAnnexError):
        return error.message
    return str(error) or type(error).__name__


class Dispatcher:
    """
    Single-threaded command loop.

    Example:
        ```python
        channel = AnnexChannel(await open_stdin_reader())
        dispatcher = Dispatcher(channel, RemoteConfig.from_env())
        await dispatcher.run()
        ```
    """

    def __init__(
        self,
        channel: AnnexChannel,
        config: RemoteConfig,
        sessions: SessionService | None = None,
    ) -> None:
        """
        Args:
            channel: Channel to the driver.
            config: Adapter configuration.
            sessions: Session service. Built from channel and config if omitted.
        """
        self._channel = channel
        self._config = config
        self._sessions = sessions or SessionService(channel, config)
        self._transfers: TransferService | None = None

        # Commands mapped to None are known but not handled.
        self._handlers: dict[str, Handler | None] = {
            "PREPARE": self._prepare,
            "INITREMOTE": self._init_remote,
            "TRANSFER": self._transfer,
            "CHECKPRESENT": self._check_present,
            "REMOVE": self._remove,
            "GETCOST": None,
            "GETAVAILABILITY": self._get_availability,
        }

    @property
    def session(self) -> Session | None:
        return self._sessions.session

    async def run(self) -> None:
        """Announce the protocol version and serve lines until end of input."""
        self._channel.send("VERSION", self._config.annex_version)
        while (line := await self._channel.readline()) is not None:
            await self.dispatch(line)
        logger.debug("Driver closed the channel")

    async def dispatch(self, line: str) -> None:
        """Handle a single instruction line."""
        command, _, args = line.partition(" ")
        if not command:
            return

        handler = self._handlers.get(command)
        if handler is None:
            logger.debug("Unsupported request", command=command)
            self._channel.send("UNSUPPORTED-REQUEST")
            return

        try:
            await handler(args)
        except ProtocolError as e:
            logger.warning("Malformed request", command=command, error=e.message)
            self._channel.send("UNSUPPORTED-REQUEST")

    async def close(self) -> None:
        await self._sessions.close()

    async def _prepare(self, args: str) -> None:
        try:
            session = await self._sessions.prepare()
        except Exception as e:
            logger.warning("Prepare failed", exc_info=e)
            self._channel.send("PREPARE-FAILURE", _reason(e))
            return

        self._transfers = TransferService(
            session.store,
            DirectoryService(session.store),
            ShardService(self._channel, session.folder),
            progress=ProgressReporter.factory(
                partial(send_progress, self._channel), self._config.progress_interval
            ),
        )
        self._channel.send("PREPARE-SUCCESS")

    async def _init_remote(self, args: str) -> None:
        try:
            self._sessions.init_remote()
        except Exception as e:
            logger.warning("Initremote failed", error=_reason(e))
            self._channel.send("INITREMOTE-FAILURE", _reason(e))
            return
        self._channel.send("INITREMOTE-SUCCESS")

    async def _transfer(self, args: str) -> None:
        params = args.split(" ", 2)
        if len(params) < 3 or not all(params):
            msg = "TRANSFER needs a direction, a key and a file"
            raise ProtocolError(msg, line=args)

        method, key, local_path = params
        try:
            direction = Direction(method)
        except ValueError:
            self._channel.send("TRANSFER-FAILURE", method, key, "Unknown method")
            return

        request = TransferRequest(key=key, local_path=local_path, direction=direction)
        try:
            await self._require_transfers().execute(request)
        except Exception as e:
            logger.warning("Transfer failed", direction=method, key=key, exc_info=e)
            self._channel.send("TRANSFER-FAILURE", method, key, _reason(e))
            return
        self._channel.send("TRANSFER-SUCCESS", method, key)

    async def _check_present(self, args: str) -> None:
        key = args.strip()
        if not key:
            msg = "CHECKPRESENT needs a key"
            raise ProtocolError(msg, line=args)

        try:
            present = await self._require_transfers().check_present(key)
        except Exception as e:
            logger.warning("Presence check failed", key=key, exc_info=e)
            self._channel.send("CHECKPRESENT-UNKNOWN", key, _reason(e))
            return

        if present:
            self._channel.send("CHECKPRESENT-SUCCESS", key)
        else:
            self._channel.send("CHECKPRESENT-FAILURE", key)

    async def _remove(self, args: str) -> None:
        # Removal is accepted without touching the store.
        key = args.strip()
        if not key:
            msg = "REMOVE needs a key"
            raise ProtocolError(msg, line=args)
        self._channel.send("REMOVE-SUCCESS", key)

    async def _get_availability(self, args: str) -> None:
        self._channel.send("AVAILABILITY", "GLOBAL")

    def _require_transfers(self) -> TransferService:
        if self._transfers is None:
            msg = "Remote not prepared"
            raise SessionError(msg)
        return self._transfers
