"""Requests sent to the driving process."""

from annex_mega.protocol.channel import AnnexChannel

CREDS_NAME = "mycreds"


async def get_config(channel: AnnexChannel, name: str) -> str:
    """Fetch a config value. Empty when unset or when ``name`` is empty."""
    if not name:
        return ""
    value = await channel.request("GETCONFIG", name, expect="VALUE")
    return value or ""


async def get_credentials(channel: AnnexChannel) -> tuple[str, str] | None:
    """Fetch stored credentials. None unless both user and password are present."""
    payload = await channel.request("GETCREDS", CREDS_NAME, expect="CREDS")
    if payload is None:
        return None

    username, _, password = payload.partition(" ")
    if not username or not password:
        return None
    return username, password


def set_credentials(channel: AnnexChannel, username: str, password: str) -> None:
    """Ask the driver to store credentials."""
    channel.send("SETCREDS", CREDS_NAME, username, password)


async def get_dir_hash(channel: AnnexChannel, key: str) -> str:
    """Fetch the directory hash of a key. Empty when the driver gives none."""
    value = await channel.request("DIRHASH", key, expect="VALUE")
    return value or ""


def send_progress(channel: AnnexChannel, total: int) -> None:
    """Report bytes transferred so far."""
    channel.send("PROGRESS", total)
