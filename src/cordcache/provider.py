"""
Collaborator contracts consumed by the cache.

:class:`Provider` mirrors the fetch methods of :class:`discord.Client`, so a
logged-in client can be handed to :class:`~cordcache.manager.ObjectCache`
directly. Tests substitute a mock with the same three coroutines.
"""

from __future__ import annotations

from typing import Any, Protocol

from discord import Guild, User
from discord.abc import GuildChannel, PrivateChannel
from discord.threads import Thread

Channel = GuildChannel | PrivateChannel | Thread


class Provider(Protocol):
    """Source of truth for Discord reference objects."""

    async def fetch_channel(self, channel_id: Any, /) -> Channel: ...

    async def fetch_user(self, user_id: Any, /) -> User: ...

    async def fetch_guild(self, guild_id: Any, /) -> Guild: ...


class AttachmentLike(Protocol):
    """Descriptor of a remote attachment (``discord.Attachment`` fits)."""

    url: str
    filename: str
    content_type: str | None


__all__ = ["Provider", "AttachmentLike", "Channel"]
