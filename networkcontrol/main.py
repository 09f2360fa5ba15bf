# networkcontrol/main.py
"""
Network Control entry point

Usage:
    networkcontrol -f https://api.factomd.net
    networkcontrol -f http://localhost:8088 --port 8091
"""

import argparse
import asyncio
import logging
import logging.config
import sys

import uvicorn

from networkcontrol.api import create_app
from networkcontrol.config import settings
from networkcontrol.errors import NetworkError
from networkcontrol.integrations import FactomdClient, FactomdConfig

logger = logging.getLogger("networkcontrol.main")


async def network_height(config: FactomdConfig) -> int:
    """Directory block height of the configured node"""
    async with FactomdClient(config) as client:
        heights = await client.get_heights()
    return int(heights.get("directoryblockheight", 0))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Authority set management for factom networks")
    parser.add_argument("-f", "--factomd", default=settings.FACTOMD_URL,
                        help="Specify the API endpoint to use")
    parser.add_argument("--host", default=settings.HOST)
    parser.add_argument("--port", type=int, default=settings.PORT)
    args = parser.parse_args(argv)

    logging.config.dictConfig(settings.get_log_config())

    factomd_config = FactomdConfig(url=args.factomd)
    logger.info(f"Using API: {args.factomd}")

    try:
        height = asyncio.run(network_height(factomd_config))
    except NetworkError as e:
        logger.error(f"Unable to reach factomd: {e.message}")
        return 1
    logger.info(f"Using network at height: {height}")

    uvicorn.run(create_app(factomd_config=factomd_config), host=args.host, port=args.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
