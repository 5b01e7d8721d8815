"""
Attachment reclamation.

:func:`prune` applies two rules in a single pass over an
:class:`~.attachments.AttachmentStore`:

1. Size: when the store holds more than ``threshold`` entries, the
   ``len(store) - threshold`` least recently referenced entries are removed.
2. Staleness: any remaining entry not referenced for longer than
   ``lifetime`` is removed.

Entries removed by the size rule are not looked at again by the staleness
rule. Both rules remove in least -> most recently referenced order.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

from .attachments import AttachmentStore

DEFAULT_LIFETIME = timedelta(minutes=5)
DEFAULT_PRUNE_THRESHOLD = 1000


def validate_limits(lifetime: timedelta, threshold: int) -> None:
    if lifetime <= timedelta(0):
        raise ValueError("attachment lifetime must be positive")
    if threshold < 0:
        raise ValueError("prune threshold must be >= 0")


def prune(
    store: AttachmentStore,
    *,
    now: datetime,
    lifetime: timedelta = DEFAULT_LIFETIME,
    threshold: int = DEFAULT_PRUNE_THRESHOLD,
) -> List[str]:
    """Remove excess and stale attachments, returning the evicted URLs."""

    validate_limits(lifetime, threshold)
    removed: List[str] = []

    excess = len(store) - threshold
    for _ in range(max(excess, 0)):
        url, _entry = store.pop_oldest()
        removed.append(url)

    stale = [
        url
        for url in store
        if (entry := store.get(url)) is not None
        and entry.last_reference is not None
        and now - entry.last_reference > lifetime
    ]
    for url in stale:
        store.pop(url)
    removed.extend(stale)

    return removed


__all__ = ["prune", "validate_limits", "DEFAULT_LIFETIME", "DEFAULT_PRUNE_THRESHOLD"]
