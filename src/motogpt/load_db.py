"""One-shot loader — scrape the source pages into the vector collection.

Run
---
    python -m motogpt.load_db
    # or, once installed
    motogpt-load-db

Configuration comes from the environment (see :mod:`motogpt.config`).
The collection is dropped and recreated on every run.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from motogpt.config import get_settings
from motogpt.errors import LoaderError
from motogpt.ingestion.pipeline import run

SOURCE_URLS = [
    "https://en.wikipedia.org/wiki/2025_MotoGP_World_Championship",
    "https://en.wikipedia.org/wiki/List_of_Grand_Prix_motorcycle_racing_winners",
]

logger = logging.getLogger("motogpt.load_db")


def main() -> int:
    """Run the loader and return a process exit code."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = get_settings()
        report = asyncio.run(run(SOURCE_URLS, settings))
    except LoaderError:
        logger.exception("Load aborted")
        return 1

    if not report.ok:
        logger.error("Load failed: %s", report.summary())
        return 1
    logger.info("Load succeeded: %s", report.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
