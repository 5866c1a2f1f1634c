"""
Progress reporting for transfers.

A reporter task consumes byte increments from a stream and turns them into
running totals, re-emitting the total after a period of silence.
"""

import asyncio
from collections.abc import Callable
from typing import Self

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_INTERVAL = 10.0


class ProgressStream:
    """
    Closable single-producer/single-consumer stream of byte increments.

    The producer calls ``send`` for every chunk moved and ``close`` once the
    transfer is over, successful or not.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[int | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, nbytes: int) -> None:
        """
        Report ``nbytes`` more bytes transferred.

        Raises:
            RuntimeError: If the stream is already closed.
        """
        if self._closed:
            msg = "Progress stream is closed"
            raise RuntimeError(msg)
        self._queue.put_nowait(nbytes)

    def close(self) -> None:
        """Signal the end of the transfer. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(None)

    async def receive(self) -> int | None:
        """Next increment, or None once the stream is closed and drained."""
        return await self._queue.get()


class ProgressReporter:
    """
    Fork-join progress monitor for one transfer.

    Example:
        ```python
        async with ProgressReporter(lambda total: print("PROGRESS", total)) as stream:
            await store.upload_file(path, parent, name, stream)
        # every progress line has been emitted here
        ```
    """

    def __init__(
        self,
        emit: Callable[[int], None],
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        """
        Args:
            emit: Called with the running total for each report.
            interval: Seconds without increments before the total is repeated.
        """
        self._emit = emit
        self._interval = interval
        self._total = 0
        self._stream: ProgressStream | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def total(self) -> int:
        """Bytes reported so far."""
        return self._total

    async def __aenter__(self) -> ProgressStream:
        self._stream = ProgressStream()
        self._task = asyncio.create_task(self._run(self._stream))
        return self._stream

    async def __aexit__(
        self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        if self._stream is not None:
            self._stream.close()
        if self._task is not None:
            await self._task
        self._stream = None
        self._task = None

    async def _run(self, stream: ProgressStream) -> None:
        while True:
            try:
                nbytes = await asyncio.wait_for(stream.receive(), timeout=self._interval)
            except TimeoutError:
                self._report()
                continue

            if nbytes is None:
                return
            self._total += nbytes
            self._report()

    def _report(self) -> None:
        try:
            self._emit(self._total)
        except Exception as e:
            logger.warning("Failed to emit progress", total=self._total, exc_info=e)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(total={self._total})"

    @classmethod
    def factory(cls, emit: Callable[[int], None], interval: float) -> Callable[[], Self]:
        """Bind ``emit`` and ``interval`` for repeated use, one reporter per transfer."""
        return lambda: cls(emit, interval)
