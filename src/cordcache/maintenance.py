"""
Optional background attachment cleaner.

The cache never cleans itself. Owners that want attachments reclaimed on a
timer call :func:`start_cleaner` from inside the running event loop and
:func:`stop_cleaner` before the loop closes.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from cordcache.config import cache as cache_cfg

if TYPE_CHECKING:
    from .manager import ObjectCache

logger = logging.getLogger(__name__)


async def _clean_forever(cache: "ObjectCache", interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        try:
            removed = cache.clean()
        except Exception:
            # one broken pass must not end the cleaner
            logger.exception("Attachment clean pass failed")
            continue
        logger.debug("Clean pass removed %d attachment(s)", removed)


def start_cleaner(cache: "ObjectCache", interval: float | None = None) -> asyncio.Task:
    """
    Schedule ``cache.clean()`` every ``interval`` seconds on the running loop.

    ``interval`` defaults to ``CLEAN_INTERVAL`` from the cache config. The
    first pass runs one interval after the call. Returns the task handle to
    pass to :func:`stop_cleaner`.
    """

    interval = cache_cfg.CLEAN_INTERVAL if interval is None else interval
    if interval <= 0:
        raise ValueError("clean interval must be positive")

    logger.info("Starting attachment cleaner (interval=%ss)", interval)
    return asyncio.create_task(_clean_forever(cache, interval), name="cordcache-cleaner")


async def stop_cleaner(task: asyncio.Task | None) -> None:
    """Cancel a cleaner from :func:`start_cleaner` and wait for it to exit."""

    if task is None or task.done():
        return

    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    logger.info("Attachment cleaner stopped")


__all__ = ["start_cleaner", "stop_cleaner"]
