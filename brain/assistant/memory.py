"""Memory layer: a pluggable key/value store for personalization.

Items are keyed by (owner, type, key) and carry a confidence score. Callers
depend on the ``MemoryStore`` protocol; the in-memory implementation is the
default and resets when the process restarts.
"""

from datetime import datetime
from typing import Literal, Protocol

from loguru import logger
from pydantic import Field

from brain.actions.types import WireModel, make_action_id, utc_now

MemoryType = Literal["goal", "preference", "fact", "recent_action"]

DEFAULT_CONFIDENCE = 0.7
UNSCORED_CONFIDENCE = 0.6  # ranking weight for items stored without a score


class MemoryItem(WireModel):
    id: str
    type: MemoryType
    key: str
    value: str
    confidence: float | None = DEFAULT_CONFIDENCE
    updated_at: datetime


class MemoryWrite(WireModel):
    type: MemoryType
    key: str
    value: str
    confidence: float | None = None


class MemoryQuery(WireModel):
    types: list[MemoryType] | None = None
    keys: list[str] | None = None  # exact match
    text: str | None = None  # case-insensitive match across key and value
    limit: int = Field(default=10, ge=0)


class MemoryStore(Protocol):
    async def get_relevant(self, query: MemoryQuery) -> list[MemoryItem]: ...

    async def upsert(self, write: MemoryWrite) -> MemoryItem: ...

    async def bulk_upsert(self, writes: list[MemoryWrite]) -> list[MemoryItem]: ...


class InMemoryMemoryStore:
    """Process-local store for one owner."""

    def __init__(self, owner_id: str = "local") -> None:
        self.owner_id = owner_id
        self._items: list[MemoryItem] = []

    async def get_relevant(self, query: MemoryQuery) -> list[MemoryItem]:
        items = list(self._items)

        if query.types:
            wanted_types = set(query.types)
            items = [item for item in items if item.type in wanted_types]

        if query.keys:
            wanted_keys = set(query.keys)
            items = [item for item in items if item.key in wanted_keys]

        text = (query.text or "").strip().lower()
        if text:
            items = [item for item in items if text in f"{item.key} {item.value}".lower()]

        # Newest items sit first, so stable sorts keep recency as the tie-break
        items.sort(key=lambda item: item.updated_at, reverse=True)
        items.sort(
            key=lambda item: item.confidence if item.confidence is not None else UNSCORED_CONFIDENCE,
            reverse=True,
        )
        return items[: query.limit]

    async def upsert(self, write: MemoryWrite) -> MemoryItem:
        now = utc_now()

        for idx, existing in enumerate(self._items):
            if existing.type == write.type and existing.key == write.key:
                confidence = write.confidence
                if confidence is None:
                    confidence = existing.confidence if existing.confidence is not None else DEFAULT_CONFIDENCE
                updated = existing.model_copy(update={"value": write.value, "confidence": confidence, "updated_at": now})
                del self._items[idx]
                self._items.insert(0, updated)
                logger.debug("Memory item updated", owner_id=self.owner_id, type=write.type, key=write.key)
                return updated

        item = MemoryItem(
            id=make_action_id("mem"),
            type=write.type,
            key=write.key,
            value=write.value,
            confidence=write.confidence if write.confidence is not None else DEFAULT_CONFIDENCE,
            updated_at=now,
        )
        self._items.insert(0, item)
        logger.debug("Memory item created", owner_id=self.owner_id, type=write.type, key=write.key)
        return item

    async def bulk_upsert(self, writes: list[MemoryWrite]) -> list[MemoryItem]:
        return [await self.upsert(write) for write in writes]


_stores: dict[str, InMemoryMemoryStore] = {}


def get_memory_store(owner_id: str = "local") -> InMemoryMemoryStore:
    """Return the process-lifetime store for ``owner_id``, creating it on first use."""
    store = _stores.get(owner_id)
    if store is None:
        store = InMemoryMemoryStore(owner_id)
        _stores[owner_id] = store
    return store
