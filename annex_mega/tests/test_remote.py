import io
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from annex_mega import AnnexRemote, RemoteConfig
from annex_mega.__main__ import main
from annex_mega.store.filesystem import FilesystemStore

KEY = "SHA256E-s11--5d41402a"


@pytest.fixture
def remote_factory(store_dir: Path, trash_dir: Path):
    def _factory(_: RemoteConfig) -> FilesystemStore:
        return FilesystemStore(store_dir, trash_dir, chunk_size=4)

    return _factory


@pytest.mark.asyncio
async def test_store_then_retrieve_round_trip(
    remote_factory, reader, store_dir: Path, make_local_file, tmp_path: Path
) -> None:
    source = make_local_file(KEY, b"hello world")
    destination = tmp_path / "restored" / KEY
    destination.parent.mkdir()
    reader.feed(
        "PREPARE",
        "VALUE",
        "VALUE annex",
        "CREDS user@example.com pw",
        f"CHECKPRESENT {KEY}",
        "VALUE ab/cd/",
        f"TRANSFER STORE {KEY} {source}",
        "VALUE ab/cd/",
        f"CHECKPRESENT {KEY}",
        "VALUE ab/cd/",
        f"TRANSFER RETRIEVE {KEY} {destination}",
        "VALUE ab/cd/",
        f"REMOVE {KEY}",
    )
    writer = io.StringIO()

    async with AnnexRemote(
        RemoteConfig(chunk_size=4), reader=reader, writer=writer, store_factory=remote_factory
    ) as remote:
        await remote.run()

    responses = [
        line
        for line in writer.getvalue().splitlines()
        if not line.startswith(("GET", "DIRHASH", "PROGRESS"))
    ]
    assert responses == [
        "VERSION 1",
        "PREPARE-SUCCESS",
        f"CHECKPRESENT-FAILURE {KEY}",
        f"TRANSFER-SUCCESS STORE {KEY}",
        f"CHECKPRESENT-SUCCESS {KEY}",
        f"TRANSFER-SUCCESS RETRIEVE {KEY}",
        f"REMOVE-SUCCESS {KEY}",
    ]
    assert "PROGRESS 11" in writer.getvalue().splitlines()
    assert (store_dir / "annex" / "ab" / "cd" / KEY).read_bytes() == b"hello world"
    assert destination.read_bytes() == b"hello world"
    assert remote.dispatcher is None


@pytest.mark.asyncio
async def test_close_is_idempotent(remote_factory, reader) -> None:
    remote = AnnexRemote(reader=reader, writer=io.StringIO(), store_factory=remote_factory)

    async with remote:
        assert remote.dispatcher is not None

    await remote.close()
    assert remote.dispatcher is None


@pytest.mark.asyncio
async def test_run_without_context_manager(remote_factory, reader) -> None:
    reader.feed("GETAVAILABILITY")
    writer = io.StringIO()
    remote = AnnexRemote(reader=reader, writer=writer, store_factory=remote_factory)

    await remote.run()
    await remote.close()

    assert writer.getvalue().splitlines() == ["VERSION 1", "AVAILABILITY GLOBAL"]


@pytest.mark.asyncio
async def test_stdout_carries_only_protocol_lines(
    remote_factory, reader, capsys: pytest.CaptureFixture[str]
) -> None:
    reader.feed(
        "PREPARE",
        "VALUE",
        "VALUE annex",
        "CREDS user@example.com pw",
        "GETAVAILABILITY",
        "FOO",
    )

    async with AnnexRemote(
        RemoteConfig(log_level="DEBUG"), reader=reader, store_factory=remote_factory
    ) as remote:
        await remote.run()

    captured = capsys.readouterr()
    assert captured.out.splitlines() == [
        "VERSION 1",
        "GETCONFIG encryption",
        "GETCONFIG folder",
        "GETCREDS mycreds",
        "PREPARE-SUCCESS",
        "AVAILABILITY GLOBAL",
        "UNSUPPORTED-REQUEST",
    ]
    assert "Remote initialized" in captured.err


@pytest.mark.asyncio
async def test_keeps_logging_configured_by_host(remote_factory, reader) -> None:
    structlog.configure(processors=[structlog.processors.JSONRenderer()])
    config = structlog.get_config()

    async with AnnexRemote(reader=reader, writer=io.StringIO(), store_factory=remote_factory):
        pass

    assert structlog.get_config() == config

def test_main_exits_on_bad_configuration(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("MEGA_ANNEX_PROGRESS_INTERVAL", "never")

    with pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 1
    assert "MEGA_ANNEX_PROGRESS_INTERVAL" in capsys.readouterr().err


def test_main_serves_with_environment_configuration(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("MEGA_ANNEX_STORE_DIR", str(tmp_path))
    monkeypatch.delenv("MEGA_ANNEX_PROGRESS_INTERVAL", raising=False)
    monkeypatch.delenv("MEGA_ANNEX_LOG_LEVEL", raising=False)
    served: list[RemoteConfig] = []

    async def fake_serve(config: RemoteConfig) -> None:
        served.append(config)

    with (
        patch("annex_mega.__main__._serve", fake_serve),
        patch("annex_mega.__main__.configure_logging") as configure,
    ):
        main()

    assert served[0].store_dir == tmp_path
    configure.assert_called_once_with("WARNING")
