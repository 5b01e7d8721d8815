"""
URL-keyed attachment store with recency ordering.

The backing :class:`~collections.OrderedDict` is kept in recency order:
the leftmost entry is the least recently referenced, the rightmost the most
recent. Every hit moves its entry to the right, so iterating the store from
the left visits entries in ascending ``last_reference`` order. The eviction
pass in :mod:`.eviction` relies on that invariant.
"""

from __future__ import annotations

import dataclasses
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator


@dataclass
class Attachment:
    """Downloaded attachment payload plus descriptor metadata."""

    name: str
    content_type: str
    content: bytes = b""
    last_reference: datetime | None = None

    @property
    def size(self) -> int:
        return len(self.content)

    def copy(self) -> "Attachment":
        # bytes are immutable, a field-level copy is enough
        return dataclasses.replace(self)


class AttachmentStore:
    """In-memory attachment cache ordered least -> most recently referenced."""

    def __init__(self) -> None:
        self._entries: "OrderedDict[str, Attachment]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def __iter__(self) -> Iterator[str]:
        """Iterate URLs from least to most recently referenced."""

        return iter(self._entries)

    def get(self, url: str) -> Attachment | None:
        return self._entries.get(url)

    def put(self, url: str, attachment: Attachment) -> None:
        """Insert ``attachment`` as the most recently referenced entry."""

        self._entries[url] = attachment
        self._entries.move_to_end(url)

    def touch(self, url: str, now: datetime) -> Attachment:
        """Record a reference to ``url`` at ``now`` and return the entry."""

        entry = self._entries[url]
        # Never move backwards, even if the clock does.
        if entry.last_reference is None or now > entry.last_reference:
            entry.last_reference = now
        self._entries.move_to_end(url)
        return entry

    def pop(self, url: str) -> Attachment:
        return self._entries.pop(url)

    def pop_oldest(self) -> tuple[str, Attachment]:
        return self._entries.popitem(last=False)

    def total_bytes(self) -> int:
        return sum(entry.size for entry in self._entries.values())

    def clear(self) -> None:
        self._entries.clear()
