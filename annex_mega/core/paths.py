"""Parsing and building of ``<root>:/<segment>/...`` addresses."""

from annex_mega.exceptions import InvalidPathError
from annex_mega.models.address import Address, Root


def parse_address(text: str) -> Address:
    """
    Parse address text into a root and its segments.

    Args:
        text: Address such as ``mega:/annex/f87/4d5/KEY``.

    Returns:
        The parsed Address.

    Raises:
        InvalidPathError: If the root token is unknown or the remainder does not
            start with a slash.
    """
    text = text.strip()
    root_token, sep, remainder = text.partition(":")
    if not sep or not remainder.startswith("/"):
        raise InvalidPathError(path=text)

    try:
        root = Root(root_token)
    except ValueError as e:
        raise InvalidPathError(path=text) from e

    segments = remainder.split("/")[1:]
    if segments and segments[-1] == "":
        segments.pop()

    # A second empty tail collapses to the root when it is all that is left,
    # otherwise two segments go. Possibly a latent bug, kept for compatibility.
    if segments and segments[-1] == "":
        segments = [] if len(segments) == 1 else segments[:-2]

    return Address(root=root, segments=tuple(segments))


def build_key_address(shard: str, key: str, folder: str) -> str:
    """
    Compose the address text of a key under the working folder.

    Args:
        shard: Directory hash for the key. May be empty or slash-terminated.
        key: Content key, used as the final segment.
        folder: Working folder under the primary root.

    Returns:
        Text form suitable for ``parse_address``.
    """
    parts = [folder]
    if shard := shard.strip("/"):
        parts.append(shard)
    parts.append(key)
    return f"{Root.PRIMARY}:/" + "/".join(parts)
