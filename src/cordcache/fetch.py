"""
Attachment download over HTTP.

One GET per call, body read fully into memory. Failures are mapped onto the
attachment errors in :mod:`cordcache.errors`:

- no response at all           -> :class:`AttachmentRequestError`
- status other than 200        -> :class:`AttachmentFetchError`
- 200 but body unreadable      -> :class:`AttachmentIOError`

No timeout is imposed beyond aiohttp's session defaults. Wrap the awaiting
call in :func:`asyncio.timeout` when a deadline is needed.
"""

from __future__ import annotations

import asyncio
import logging

import aiohttp

from .errors import AttachmentFetchError, AttachmentIOError, AttachmentRequestError

logger = logging.getLogger(__name__)


async def _read(session: aiohttp.ClientSession, url: str) -> bytes:
    try:
        async with session.get(url) as resp:
            if resp.status != 200:
                raise AttachmentFetchError(url, resp.status)
            try:
                return await resp.read()
            except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as exc:
                raise AttachmentIOError(url, str(exc)) from exc
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise AttachmentRequestError(url, str(exc)) from exc


async def download(url: str, session: aiohttp.ClientSession | None = None) -> bytes:
    """
    Return the body of ``url``.

    Uses ``session`` when given, otherwise a short-lived session is opened for
    this single request.
    """

    logger.debug("Downloading attachment %s", url)
    if session is not None:
        return await _read(session, url)
    async with aiohttp.ClientSession() as own_session:
        return await _read(own_session, url)


__all__ = ["download"]
