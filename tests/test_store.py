"""
Tests for the JSON document course store.
"""

import asyncio
import json
from unittest.mock import patch

import pytest

from coursebook.modules.storage import (
    CorruptStoreError,
    CourseNotFoundError,
    CourseStore,
    EmptyStoreError,
    IdentifierAllocator,
    IdentifierSpaceExhaustedError,
    StorageFaultError,
    decode_document,
    encode_document,
)


def _payload(title="T", description="D"):
    return {"title": title, "description": description}


@pytest.mark.asyncio
async def test_initialize_creates_empty_document(store_path):
    """Startup creates the document when it does not exist."""
    store = CourseStore(str(store_path))

    await store.initialize()

    assert json.loads(store_path.read_text()) == {"courses": []}


@pytest.mark.asyncio
async def test_initialize_keeps_existing_document(store_path):
    """Startup never overwrites existing data."""
    store_path.write_text(encode_document({"courses": [{"id": 1, "title": "A", "description": "B"}]}))
    store = CourseStore(str(store_path))

    await store.initialize()

    assert await store.list_all() == [{"id": 1, "title": "A", "description": "B"}]


@pytest.mark.asyncio
async def test_create_then_get(course_store):
    """A created course can be read back by its id."""
    created = await course_store.create(_payload("T", "D"))

    assert created["id"] is not None
    fetched = await course_store.get_by_id(created["id"])
    assert fetched["title"] == "T"
    assert fetched["description"] == "D"


@pytest.mark.asyncio
async def test_create_ignores_extra_payload_fields(course_store):
    created = await course_store.create({"title": "T", "description": "D", "id": -1, "owner": "x"})

    assert set(created) == {"id", "title", "description"}
    assert created["id"] != -1


@pytest.mark.asyncio
async def test_list_preserves_order(course_store):
    first = await course_store.create(_payload("first"))
    second = await course_store.create(_payload("second"))
    third = await course_store.create(_payload("third"))

    courses = await course_store.list_all()

    assert [c["id"] for c in courses] == [first["id"], second["id"], third["id"]]


@pytest.mark.asyncio
async def test_get_missing_returns_none(course_store):
    assert await course_store.get_by_id(42) is None


@pytest.mark.asyncio
async def test_returned_records_are_copies(course_store):
    """Mutating a returned record does not touch the store."""
    created = await course_store.create(_payload("T", "D"))

    fetched = await course_store.get_by_id(created["id"])
    fetched["title"] = "changed"
    created["title"] = "changed"

    assert (await course_store.get_by_id(created["id"]))["title"] == "T"


@pytest.mark.asyncio
async def test_get_random_empty_store(course_store):
    """Random selection on an empty store signals empty, never indexes out of range."""
    with pytest.raises(EmptyStoreError):
        await course_store.get_random()


@pytest.mark.asyncio
async def test_get_random_returns_stored_course(course_store):
    created = [await course_store.create(_payload(f"course {i}")) for i in range(3)]

    for _ in range(10):
        assert await course_store.get_random() in created


@pytest.mark.asyncio
async def test_update_existing(course_store):
    created = await course_store.create(_payload("old", "old"))

    await course_store.update(created["id"], _payload("new title", "new description"))

    assert await course_store.get_by_id(created["id"]) == {
        "id": created["id"],
        "title": "new title",
        "description": "new description",
    }


@pytest.mark.asyncio
async def test_update_not_found_leaves_document_unchanged(course_store, store_path):
    await course_store.create(_payload("keep", "me"))
    before = store_path.read_text()

    with pytest.raises(CourseNotFoundError):
        await course_store.update(99999, _payload("x", "y"))

    assert store_path.read_text() == before


@pytest.mark.asyncio
async def test_delete_then_delete_again(course_store):
    """Deleting succeeds once, then reports not-found."""
    created = await course_store.create(_payload())

    await course_store.delete(created["id"])
    assert await course_store.get_by_id(created["id"]) is None

    with pytest.raises(CourseNotFoundError):
        await course_store.delete(created["id"])


@pytest.mark.asyncio
async def test_delete_missing(course_store):
    with pytest.raises(CourseNotFoundError) as exc_info:
        await course_store.delete(12345)

    assert exc_info.value.course_id == 12345


@pytest.mark.asyncio
async def test_ids_unique_until_range_exhausted(store_path):
    """Every create gets a distinct id; a full range fails loudly."""
    store = CourseStore(str(store_path), allocator=IdentifierAllocator(upper_bound=20))
    await store.initialize()

    for i in range(20):
        await store.create(_payload(f"course {i}"))

    ids = [c["id"] for c in await store.list_all()]
    assert sorted(ids) == list(range(20))

    with pytest.raises(IdentifierSpaceExhaustedError):
        await store.create(_payload("one too many"))
    assert len(await store.list_all()) == 20


@pytest.mark.asyncio
async def test_concurrent_creates_are_not_lost(course_store):
    """Two concurrent creates on an empty store both land with distinct ids."""
    first, second = await asyncio.gather(
        course_store.create(_payload("first")),
        course_store.create(_payload("second")),
    )

    courses = await course_store.list_all()
    assert len(courses) == 2
    assert first["id"] != second["id"]
    assert {c["id"] for c in courses} == {first["id"], second["id"]}


@pytest.mark.asyncio
async def test_many_concurrent_mutations(course_store):
    created = await asyncio.gather(*(course_store.create(_payload(f"c{i}")) for i in range(25)))

    await asyncio.gather(
        *(course_store.update(c["id"], _payload("updated", c["title"])) for c in created[:10]),
        *(course_store.delete(c["id"]) for c in created[10:20]),
    )

    courses = await course_store.list_all()
    assert len(courses) == 15
    assert sum(1 for c in courses if c["title"] == "updated") == 10


@pytest.mark.asyncio
async def test_persisted_document_round_trips(course_store, store_path):
    """Re-encoding a written document reproduces it exactly."""
    await course_store.create(_payload("Ünïcode title", "line\nbreak"))
    await course_store.create(_payload())

    raw = store_path.read_text()

    assert encode_document(decode_document(raw)) == raw


@pytest.mark.asyncio
async def test_unknown_fields_survive_rewrites(store_path):
    store_path.write_text(
        encode_document(
            {
                "version": 3,
                "courses": [{"id": 7, "title": "A", "description": "B", "estimatedTime": "6 hours"}],
            }
        )
    )
    store = CourseStore(str(store_path))

    await store.update(7, _payload("A2", "B2"))
    await store.create(_payload())

    document = json.loads(store_path.read_text())
    assert document["version"] == 3
    assert document["courses"][0]["estimatedTime"] == "6 hours"


@pytest.mark.asyncio
async def test_invalid_json_is_corrupt(store_path):
    store_path.write_text("{not json")
    store = CourseStore(str(store_path))

    with pytest.raises(CorruptStoreError):
        await store.list_all()


@pytest.mark.asyncio
async def test_non_utf8_document_is_corrupt(store_path):
    store_path.write_bytes(b'{"courses": [{"id": 1, "title": "\xff\xfe", "description": "D"}]}')
    store = CourseStore(str(store_path))

    with pytest.raises(CorruptStoreError):
        await store.list_all()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content",
    [
        "[]",
        '{"items": []}',
        '{"courses": {}}',
        '{"courses": [{"title": "no id"}]}',
        '{"courses": ["not an object"]}',
        '{"courses": [{"id": 1}]}',
        '{"courses": [{"id": 1, "title": "T"}]}',
        '{"courses": [{"id": 1, "title": 5, "description": "D"}]}',
        '{"courses": [{"id": 1, "title": "T", "description": null}]}',
        '{"courses": [{"id": true, "title": "T", "description": "D"}]}',
        '{"courses": [{"id": "1", "title": "T", "description": "D"}]}',
    ],
)
async def test_wrong_shape_is_corrupt(store_path, content):
    store_path.write_text(content)
    store = CourseStore(str(store_path))

    with pytest.raises(CorruptStoreError):
        await store.get_by_id(1)


@pytest.mark.asyncio
async def test_corrupt_store_rejects_mutation(store_path):
    store_path.write_text("garbage")
    store = CourseStore(str(store_path))

    with pytest.raises(StorageFaultError):
        await store.create(_payload())

    assert store_path.read_text() == "garbage"


@pytest.mark.asyncio
async def test_missing_document_is_storage_fault(store_path):
    store = CourseStore(str(store_path))

    with pytest.raises(StorageFaultError) as exc_info:
        await store.list_all()

    assert not isinstance(exc_info.value, CorruptStoreError)


@pytest.mark.asyncio
async def test_write_failure_is_storage_fault(course_store, store_path):
    """A failed write surfaces as a fault and leaves no temp files behind."""
    before = store_path.read_text()

    with patch("coursebook.modules.storage.store.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(StorageFaultError):
            await course_store.create(_payload())

    assert store_path.read_text() == before
    assert [p.name for p in store_path.parent.iterdir()] == [store_path.name]
