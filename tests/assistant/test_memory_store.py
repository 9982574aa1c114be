"""In-memory store: upsert semantics and relevance ordering."""

from datetime import timedelta

import pytest

from brain.assistant.memory import (
    DEFAULT_CONFIDENCE,
    InMemoryMemoryStore,
    MemoryQuery,
    MemoryWrite,
    get_memory_store,
)


@pytest.fixture
def store() -> InMemoryMemoryStore:
    return InMemoryMemoryStore("owner-1")


@pytest.mark.asyncio
async def test_insert_uses_default_confidence(store):
    item = await store.upsert(MemoryWrite(type="goal", key="plan.goal", value="ship it"))

    assert item.confidence == DEFAULT_CONFIDENCE
    assert item.id.startswith("mem_")


@pytest.mark.asyncio
async def test_upsert_updates_same_type_and_key(store):
    first = await store.upsert(MemoryWrite(type="goal", key="plan.goal", value="v1", confidence=0.9))
    second = await store.upsert(MemoryWrite(type="goal", key="plan.goal", value="v2"))

    items = await store.get_relevant(MemoryQuery())
    assert len(items) == 1
    assert second.id == first.id
    assert second.value == "v2"
    assert second.confidence == 0.9
    assert second.updated_at >= first.updated_at


@pytest.mark.asyncio
async def test_same_key_different_type_is_separate(store):
    await store.upsert(MemoryWrite(type="goal", key="x", value="a"))
    await store.upsert(MemoryWrite(type="preference", key="x", value="b"))

    assert len(await store.get_relevant(MemoryQuery())) == 2


@pytest.mark.asyncio
async def test_filters(store):
    await store.bulk_upsert([
        MemoryWrite(type="goal", key="fitness.goal", value="Run a marathon"),
        MemoryWrite(type="preference", key="workout.time", value="mornings"),
        MemoryWrite(type="fact", key="city", value="Leeds"),
    ])

    by_type = await store.get_relevant(MemoryQuery(types=["goal", "fact"]))
    by_key = await store.get_relevant(MemoryQuery(keys=["workout.time"]))
    by_text = await store.get_relevant(MemoryQuery(text="MARATHON"))
    by_key_text = await store.get_relevant(MemoryQuery(text="fitness"))

    assert {item.key for item in by_type} == {"fitness.goal", "city"}
    assert [item.value for item in by_key] == ["mornings"]
    assert [item.key for item in by_text] == ["fitness.goal"]
    assert [item.key for item in by_key_text] == ["fitness.goal"]


@pytest.mark.asyncio
async def test_ordering_confidence_then_recency(store):
    low = await store.upsert(MemoryWrite(type="fact", key="low", value="x", confidence=0.2))
    await store.upsert(MemoryWrite(type="fact", key="old", value="x", confidence=0.8))
    newer = await store.upsert(MemoryWrite(type="fact", key="new", value="x", confidence=0.8))
    # Force a strict recency gap regardless of clock resolution
    store._items = [
        item.model_copy(update={"updated_at": newer.updated_at + timedelta(seconds=1)}) if item.key == "new" else item
        for item in store._items
    ]

    items = await store.get_relevant(MemoryQuery())

    assert [item.key for item in items] == ["new", "old", "low"]
    assert items[-1].id == low.id


@pytest.mark.asyncio
async def test_unscored_items_rank_below_default(store):
    await store.upsert(MemoryWrite(type="fact", key="scored", value="x", confidence=0.65))
    unscored = await store.upsert(MemoryWrite(type="fact", key="unscored", value="x"))
    store._items = [
        item.model_copy(update={"confidence": None}) if item.id == unscored.id else item for item in store._items
    ]

    items = await store.get_relevant(MemoryQuery())

    assert [item.key for item in items] == ["scored", "unscored"]


@pytest.mark.asyncio
async def test_limit(store):
    await store.bulk_upsert([MemoryWrite(type="fact", key=f"k{i}", value="v") for i in range(5)])

    assert len(await store.get_relevant(MemoryQuery(limit=2))) == 2
    assert await store.get_relevant(MemoryQuery(limit=0)) == []


def test_store_per_owner_is_shared():
    assert get_memory_store("alice") is get_memory_store("alice")
    assert get_memory_store("alice") is not get_memory_store("bob")
