import io
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path

import pytest
import pytest_asyncio
import structlog

from annex_mega.config import RemoteConfig
from annex_mega.models.node import NodeType, RemoteNode
from annex_mega.protocol.channel import AnnexChannel
from annex_mega.store.filesystem import FilesystemStore

USERNAME = "user@example.com"
PASSWORD = "secret pass"


class ScriptedReader:
    """Plays back driver lines, then reports end of input."""

    def __init__(self, lines: list[str] | None = None) -> None:
        self._lines = list(lines or [])

    def feed(self, *lines: str) -> None:
        self._lines.extend(lines)

    @property
    def pending(self) -> list[str]:
        return list(self._lines)

    async def readline(self) -> bytes:
        if not self._lines:
            return b""
        return (self._lines.pop(0) + "\n").encode()


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


@pytest.fixture
def config() -> RemoteConfig:
    return RemoteConfig(chunk_size=16)


@pytest.fixture
def reader() -> ScriptedReader:
    return ScriptedReader()


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def channel(reader: ScriptedReader, output: io.StringIO) -> AnnexChannel:
    return AnnexChannel(reader, output)


@pytest.fixture
def sent(output: io.StringIO) -> Callable[[], list[str]]:
    def _sent() -> list[str]:
        return output.getvalue().splitlines()

    return _sent


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    path = tmp_path / "mega"
    path.mkdir()
    return path


@pytest.fixture
def trash_dir(tmp_path: Path) -> Path:
    return tmp_path / "trash"


@pytest_asyncio.fixture
async def fs_store(store_dir: Path, trash_dir: Path) -> AsyncIterator[FilesystemStore]:
    store = FilesystemStore(store_dir, trash_dir, chunk_size=16)
    await store.login(USERNAME, PASSWORD)

    yield store

    await store.close()


@pytest.fixture
def make_node() -> Callable[..., RemoteNode]:
    def _make(
        name: str = "node",
        node_type: NodeType = NodeType.FOLDER,
        size: int = 0,
        parent_handle: str | None = "/",
    ) -> RemoteNode:
        handle = f"{parent_handle.rstrip('/')}/{name}" if parent_handle else "/"
        return RemoteNode(
            handle=handle,
            name=name,
            node_type=node_type,
            size=size,
            parent_handle=parent_handle,
        )

    return _make


@pytest.fixture
def make_local_file(tmp_path: Path) -> Callable[..., Path]:
    def _make(name: str, content: bytes, directory: str = "local") -> Path:
        folder = tmp_path / directory
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / name
        path.write_bytes(content)
        return path

    return _make
