"""
Key sharding service.

Places each key below a shard folder whose name is computed by the driver.
"""

import structlog

from annex_mega.core.paths import build_key_address, parse_address
from annex_mega.models.address import Address
from annex_mega.protocol.channel import AnnexChannel
from annex_mega.protocol.messages import get_dir_hash

logger = structlog.get_logger(__name__)


class ShardService:
    """Maps content keys to addresses under the working folder."""

    def __init__(self, channel: AnnexChannel, folder: str) -> None:
        """
        Args:
            channel: Channel to the driver, used for DIRHASH.
            folder: Working folder under the primary root.
        """
        self._channel = channel
        self._folder = folder

    @property
    def folder(self) -> str:
        return self._folder

    async def shard_for(self, key: str) -> str:
        """Shard of ``key``, or an empty string when the driver gives none."""
        shard = await get_dir_hash(self._channel, key)
        if not shard:
            logger.debug("No shard for key, placing it under the folder", key=key)
        return shard

    async def address_for(self, key: str) -> Address:
        """
        Full address of ``key``. Asks the driver for the shard exactly once.

        Raises:
            InvalidPathError: If the composed address cannot be parsed.
        """
        shard = await self.shard_for(key)
        return parse_address(build_key_address(shard, key, self._folder))
