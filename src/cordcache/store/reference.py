"""
Read-through store for one kind of Discord reference object.

Each :class:`ReferenceStore` owns a plain dict keyed by the string form of the
object id. Entries are only written after the resolver succeeds and live until
they are invalidated; there is no expiry. Callers always receive a shallow
copy so mutating a returned object never alters the cached snapshot.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from ..errors import EntryMissingError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def normalize_id(object_id: Any) -> str:
    """Return the cache key for ``object_id`` (``42`` and ``"42"`` collide)."""

    return str(object_id)


class ReferenceStore(Generic[T]):
    """Snapshots of a single object kind, filled on demand by ``resolve``."""

    def __init__(self, kind: str, resolve: Callable[[Any], Awaitable[T]]) -> None:
        self.kind = kind
        self._resolve = resolve
        self._entries: dict[str, T] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, object_id: object) -> bool:
        return normalize_id(object_id) in self._entries

    async def lookup(self, object_id: Any) -> T:
        """
        Return a copy of the cached object, resolving it on a miss.

        Resolver exceptions propagate untouched and leave the store unchanged,
        so the next lookup for the same id asks the resolver again.
        """

        key = normalize_id(object_id)
        if key in self._entries:
            logger.debug("%s %s: cache hit", self.kind, key)
            return copy.copy(self._entries[key])

        logger.debug("%s %s: cache miss, resolving", self.kind, key)
        resolved = await self._resolve(object_id)
        self._entries[key] = resolved
        return copy.copy(resolved)

    def invalidate(self, object_id: Any) -> None:
        """Drop the entry for ``object_id``; raise if it was never cached."""

        key = normalize_id(object_id)
        try:
            del self._entries[key]
        except KeyError:
            raise EntryMissingError(self.kind, key) from None
        logger.debug("%s %s: invalidated", self.kind, key)

    def clear(self) -> None:
        self._entries.clear()
