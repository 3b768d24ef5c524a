"""
Download the hololive OCG card catalog.

Run this job before starting the service, and again after each card release.
"""

import asyncio
import logging

from hocgdeck.services.card_database import download_card_catalog

logger = logging.getLogger(__name__)


async def run_download() -> None:
    """Download the card catalog to the configured path."""
    logger.info("Downloading card catalog...")

    try:
        path = await download_card_catalog()
    except Exception:
        logger.exception("Failed to download card catalog")
        raise
    logger.info("Downloaded card catalog to %s", path)


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_download())


if __name__ == "__main__":
    main()
