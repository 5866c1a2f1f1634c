import pytest

from annex_mega.protocol.channel import AnnexChannel
from annex_mega.protocol.messages import (
    get_config,
    get_credentials,
    get_dir_hash,
    send_progress,
    set_credentials,
)


@pytest.mark.asyncio
async def test_get_config_returns_value(channel: AnnexChannel, reader, sent) -> None:
    reader.feed("VALUE backups/annex")

    assert await get_config(channel, "folder") == "backups/annex"
    assert sent() == ["GETCONFIG folder"]


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", ["VALUE", "VALUE ", "ERROR unknown"])
async def test_get_config_returns_empty_when_unset(
    channel: AnnexChannel, reader, reply: str
) -> None:
    reader.feed(reply)

    assert await get_config(channel, "folder") == ""


@pytest.mark.asyncio
async def test_get_config_with_empty_name_sends_nothing(channel: AnnexChannel, sent) -> None:
    assert await get_config(channel, "") == ""
    assert sent() == []


@pytest.mark.asyncio
async def test_get_credentials_splits_user_from_password(
    channel: AnnexChannel, reader, sent
) -> None:
    reader.feed("CREDS user@example.com pass with spaces")

    assert await get_credentials(channel) == ("user@example.com", "pass with spaces")
    assert sent() == ["GETCREDS mycreds"]


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", ["CREDS", "CREDS ", "CREDS user", "CREDS user ", "VALUE a b"])
async def test_get_credentials_requires_both_fields(
    channel: AnnexChannel, reader, reply: str
) -> None:
    reader.feed(reply)

    assert await get_credentials(channel) is None


@pytest.mark.asyncio
async def test_get_credentials_at_end_of_input(channel: AnnexChannel) -> None:
    assert await get_credentials(channel) is None


def test_set_credentials(channel: AnnexChannel, sent) -> None:
    set_credentials(channel, "user", "pw")

    assert sent() == ["SETCREDS mycreds user pw"]


@pytest.mark.asyncio
async def test_get_dir_hash(channel: AnnexChannel, reader, sent) -> None:
    reader.feed("VALUE a1/b2/")

    assert await get_dir_hash(channel, "KEY") == "a1/b2/"
    assert sent() == ["DIRHASH KEY"]


def test_send_progress(channel: AnnexChannel, sent) -> None:
    send_progress(channel, 0)
    send_progress(channel, 4096)

    assert sent() == ["PROGRESS 0", "PROGRESS 4096"]
