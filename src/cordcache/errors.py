"""
Exceptions raised by the cache.

Provider failures (``discord.NotFound``, ``discord.HTTPException`` and so on)
are not wrapped; they reach the caller exactly as the provider raised them.
Nothing in this module is ever stored in the cache.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .store.attachments import Attachment


class CacheError(RuntimeError):
    """Base class for every error raised by :mod:`cordcache`."""

    pass


class EntryMissingError(CacheError, KeyError):
    """Raised when invalidating an id that is not cached."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"cache: {kind} entry {key!r} not present")
        self.kind = kind
        self.key = key

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class MissingProviderError(CacheError, ValueError):
    """Raised when a cache is constructed without a provider."""

    def __init__(self) -> None:
        super().__init__("cache: attempted to create cache with no provider")


class AttachmentError(CacheError):
    """
    Base class for attachment download failures.

    ``attachment`` holds the descriptor metadata (name and content type) with
    empty content so callers can still label the failed download.
    """

    reason = "attachment download failed"

    def __init__(
        self,
        url: str,
        detail: str | None = None,
        *,
        attachment: "Attachment | None" = None,
    ) -> None:
        message = f"cache: attachment download: {self.reason}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.url = url
        self.attachment = attachment


class AttachmentRequestError(AttachmentError):
    """The request never produced a response (DNS, connection, timeout)."""

    reason = "network request failed"


class AttachmentFetchError(AttachmentError):
    """The attachment source answered with a non-200 status."""

    reason = "http error"

    def __init__(
        self,
        url: str,
        status: int,
        *,
        attachment: "Attachment | None" = None,
    ) -> None:
        super().__init__(url, f"status {status}", attachment=attachment)
        self.status = status


class AttachmentIOError(AttachmentError):
    """The response arrived but its body could not be read."""

    reason = "I/O error"


__all__ = [
    "CacheError",
    "EntryMissingError",
    "MissingProviderError",
    "AttachmentError",
    "AttachmentRequestError",
    "AttachmentFetchError",
    "AttachmentIOError",
]
