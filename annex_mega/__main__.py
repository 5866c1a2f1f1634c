"""Console entry point: ``git-annex-remote-mega`` or ``python -m annex_mega``."""

import asyncio
import sys

from annex_mega.config import RemoteConfig
from annex_mega.exceptions import ConfigurationError
from annex_mega.logging_config import configure_logging
from annex_mega.remote import AnnexRemote


async def _serve(config: RemoteConfig) -> None:
    async with AnnexRemote(config) as remote:
        await remote.run()


def main() -> None:
    try:
        config = RemoteConfig.from_env()
    except ConfigurationError as e:
        print(f"annex-mega: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(config.log_level)
    try:
        asyncio.run(_serve(config))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
