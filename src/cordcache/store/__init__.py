"""
Backing stores for the cache.

Modules
=======

``reference``
    Defines :class:`~cordcache.store.reference.ReferenceStore`, the read-through
    map used for channels, users and guilds.
``attachments``
    Provides :class:`~cordcache.store.attachments.Attachment` and the
    recency-ordered :class:`~cordcache.store.attachments.AttachmentStore`.
``eviction``
    Implements :func:`~cordcache.store.eviction.prune`, the size and staleness
    reclamation pass over the attachment store.
"""

from .attachments import Attachment, AttachmentStore
from .eviction import prune
from .reference import ReferenceStore

__all__ = ["Attachment", "AttachmentStore", "ReferenceStore", "prune"]
