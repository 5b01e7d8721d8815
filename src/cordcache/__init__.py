"""Read-through cache for Discord channels, users, guilds and attachments."""

import logging

from .config import configure_logging
from .errors import (
    AttachmentError,
    AttachmentFetchError,
    AttachmentIOError,
    AttachmentRequestError,
    CacheError,
    EntryMissingError,
    MissingProviderError,
)
from .manager import CacheStats, ObjectCache
from .provider import AttachmentLike, Provider
from .store import Attachment

__all__ = [
    "configure_logging",
    "ObjectCache",
    "CacheStats",
    "Attachment",
    "Provider",
    "AttachmentLike",
    "CacheError",
    "EntryMissingError",
    "MissingProviderError",
    "AttachmentError",
    "AttachmentFetchError",
    "AttachmentIOError",
    "AttachmentRequestError",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
