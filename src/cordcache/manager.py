"""Cache facade combining the reference stores and the attachment store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import aiohttp
from discord import Guild, User

from cordcache.config import cache as cache_cfg

from . import fetch
from .errors import AttachmentError, MissingProviderError
from .provider import AttachmentLike, Channel, Provider
from .store.attachments import Attachment, AttachmentStore
from .store.eviction import prune, validate_limits
from .store.reference import ReferenceStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class CacheStats:
    """Point-in-time entry counts."""

    channels: int
    users: int
    guilds: int
    attachments: int
    attachment_bytes: int


class ObjectCache:
    """
    Read-through cache of Discord channels, users, guilds and attachments.

    ``provider`` is the source of truth for reference objects, typically a
    logged-in :class:`discord.Client`. Reference objects are kept until
    explicitly invalidated. Attachments are reclaimed by :meth:`clean`, which
    the owner is expected to call periodically (see
    :func:`cordcache.maintenance.start_cleaner`).

    Not safe for concurrent use. The stores are mutated in place across
    ``await`` points without locking, so tasks sharing one instance must
    serialize their calls, e.g. behind a single :class:`asyncio.Lock`.
    """

    def __init__(
        self,
        provider: Provider | None,
        *,
        session: aiohttp.ClientSession | None = None,
        attachment_lifetime: timedelta | None = None,
        prune_threshold: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if provider is None:
            raise MissingProviderError()

        self._provider = provider
        self._session = session
        self._clock = clock or _utcnow
        self.attachment_lifetime = (
            attachment_lifetime
            if attachment_lifetime is not None
            else timedelta(seconds=cache_cfg.ATTACHMENT_LIFETIME)
        )
        self.prune_threshold = (
            prune_threshold
            if prune_threshold is not None
            else cache_cfg.ATTACHMENT_PRUNE_THRESHOLD
        )
        validate_limits(self.attachment_lifetime, self.prune_threshold)

        self._channels: ReferenceStore[Channel] = ReferenceStore("channel", provider.fetch_channel)
        self._users: ReferenceStore[User] = ReferenceStore("user", provider.fetch_user)
        self._guilds: ReferenceStore[Guild] = ReferenceStore("guild", provider.fetch_guild)
        self._attachments = AttachmentStore()

    # ------------------------------------------------------------------ #
    # REFERENCE OBJECTS
    # ------------------------------------------------------------------ #

    async def channel(self, channel_id: Any) -> Channel:
        """Return a channel, asking the provider only on a cache miss."""

        return await self._channels.lookup(channel_id)

    async def user(self, user_id: Any) -> User:
        """Return a user, asking the provider only on a cache miss."""

        return await self._users.lookup(user_id)

    async def guild(self, guild_id: Any) -> Guild:
        """Return a guild, asking the provider only on a cache miss."""

        return await self._guilds.lookup(guild_id)

    def invalidate_channel(self, channel_id: Any) -> None:
        self._channels.invalidate(channel_id)

    def invalidate_user(self, user_id: Any) -> None:
        self._users.invalidate(user_id)

    def invalidate_guild(self, guild_id: Any) -> None:
        self._guilds.invalidate(guild_id)

    # ------------------------------------------------------------------ #
    # ATTACHMENTS
    # ------------------------------------------------------------------ #

    async def get_attachment(self, descriptor: AttachmentLike) -> Attachment:
        """
        Return the downloaded attachment described by ``descriptor``.

        Repeat calls for the same URL never hit the network; they only refresh
        the entry's ``last_reference``. On failure an
        :class:`~cordcache.errors.AttachmentError` is raised with
        ``exc.attachment`` set to the metadata-only attachment, and nothing is
        cached.
        """

        url = descriptor.url
        if url in self._attachments:
            logger.debug("attachment %s: cache hit", url)
            return self._attachments.touch(url, self._clock()).copy()

        result = Attachment(
            name=descriptor.filename,
            content_type=descriptor.content_type or "",
        )
        try:
            result.content = await fetch.download(url, self._session)
        except AttachmentError as exc:
            logger.warning("Failed to download attachment %s: %s", result.name, exc)
            exc.attachment = result
            raise

        result.last_reference = self._clock()
        self._attachments.put(url, result)
        logger.debug("attachment %s: cached %d bytes", url, result.size)
        return result.copy()

    # ------------------------------------------------------------------ #
    # MAINTENANCE
    # ------------------------------------------------------------------ #

    def clean(self) -> int:
        """
        Drop excess and stale attachments; return how many were removed.

        Excess entries (above ``prune_threshold``) go least recently used
        first. Reference objects are never touched.
        """

        removed = prune(
            self._attachments,
            now=self._clock(),
            lifetime=self.attachment_lifetime,
            threshold=self.prune_threshold,
        )
        if removed:
            logger.info(
                "Cleaned %d attachment(s); %d remain", len(removed), len(self._attachments)
            )
        return len(removed)

    def clear(self) -> None:
        """Forget every cached object and attachment."""

        self._channels.clear()
        self._users.clear()
        self._guilds.clear()
        self._attachments.clear()

    def stats(self) -> CacheStats:
        return CacheStats(
            channels=len(self._channels),
            users=len(self._users),
            guilds=len(self._guilds),
            attachments=len(self._attachments),
            attachment_bytes=self._attachments.total_bytes(),
        )


__all__ = ["ObjectCache", "CacheStats"]
