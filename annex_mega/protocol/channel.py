"""
Line channel to the driving process.

Requests and replies are single lines of space-separated fields. The channel
is strictly sequential: a reply is read right after its request is written.
"""

import asyncio
import sys
from typing import Protocol, TextIO

import structlog

logger = structlog.get_logger(__name__)

# Commands whose fields must never be logged verbatim.
SENSITIVE_COMMANDS = frozenset({"CREDS", "SETCREDS"})


class LineReader(Protocol):
    """Anything with an async ``readline`` returning bytes, like asyncio.StreamReader."""

    async def readline(self) -> bytes: ...


def sanitize_for_log(line: str) -> str:
    """
    Hide credentials carried by a protocol line.

    Args:
        line: Raw protocol line.

    Returns:
        The line with every field after the command replaced by "***" for
        credential commands, otherwise unchanged.
    """
    command, _, rest = line.partition(" ")
    if command in SENSITIVE_COMMANDS and rest:
        return f"{command} ***"
    return line


async def open_stdin_reader() -> asyncio.StreamReader:
    """Wrap the process stdin in an asyncio StreamReader."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
    return reader


class AnnexChannel:
    """Reads instructions from and writes responses to the driving process."""

    def __init__(self, reader: LineReader, writer: TextIO | None = None) -> None:
        """
        Args:
            reader: Source of inbound lines.
            writer: Sink for outbound lines. Defaults to stdout.
        """
        self._reader = reader
        self._writer = writer or sys.stdout
        self._eof = False

    @property
    def at_eof(self) -> bool:
        """True once the driver closed its end."""
        return self._eof

    async def readline(self) -> str | None:
        """
        Read one line.

        Returns:
            The line without its terminator, or None at end of input.
        """
        if self._eof:
            return None
        raw = await self._reader.readline()
        if not raw:
            self._eof = True
            return None
        line = raw.decode("utf-8", errors="surrogateescape").rstrip("\r\n")
        logger.debug("Received", line=sanitize_for_log(line))
        return line

    def send(self, *fields: object) -> None:
        """Write one line made of ``fields`` joined by spaces."""
        line = " ".join(str(f) for f in fields)
        self._writer.write(line + "\n")
        self._writer.flush()
        logger.debug("Sent", line=sanitize_for_log(line))

    async def request(self, *fields: object, expect: str) -> str | None:
        """
        Send a request and read its reply.

        Args:
            fields: Request fields.
            expect: Command the reply must carry, e.g. "VALUE".

        Returns:
            Everything after the reply command, or None if the reply is
            missing, carries another command or has no payload.
        """
        self.send(*fields)
        reply = await self.readline()
        if reply is None:
            return None

        command, sep, payload = reply.partition(" ")
        if command == expect and not sep:
            logger.debug("Empty reply", command=command)
            return None
        if command != expect:
            logger.warning("Unexpected reply", expected=expect, got=command)
            return None
        return payload
