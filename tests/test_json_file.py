from __future__ import annotations

import asyncio
import json

import pytest

from orderdesk.errors import StorageError
from orderdesk.storage.json_file import JsonCollection


@pytest.mark.asyncio
async def test_missing_file_reads_as_empty(tmp_path) -> None:
    coll = JsonCollection(tmp_path / "nested" / "orders.json")

    assert await coll.read_all() == []


@pytest.mark.asyncio
async def test_mutate_persists_and_leaves_no_temp_files(tmp_path) -> None:
    coll = JsonCollection(tmp_path / "data" / "orders.json")

    async with coll.mutate() as records:
        records.append({"id": "a"})

    assert json.loads(coll.path.read_text()) == [{"id": "a"}]
    assert [p.name for p in coll.path.parent.iterdir()] == ["orders.json"]


@pytest.mark.asyncio
async def test_failed_mutation_writes_nothing(tmp_path) -> None:
    coll = JsonCollection(tmp_path / "orders.json")
    async with coll.mutate() as records:
        records.append({"id": "a"})

    with pytest.raises(RuntimeError):
        async with coll.mutate() as records:
            records.append({"id": "b"})
            raise RuntimeError("boom")

    assert await coll.read_all() == [{"id": "a"}]


@pytest.mark.asyncio
async def test_concurrent_writers_do_not_lose_updates(tmp_path) -> None:
    coll = JsonCollection(tmp_path / "orders.json")

    async def add(i: int) -> None:
        async with coll.mutate() as records:
            await asyncio.sleep(0)
            records.append({"id": str(i)})

    await asyncio.gather(*(add(i) for i in range(25)))

    records = await coll.read_all()
    assert sorted(int(r["id"]) for r in records) == list(range(25))


@pytest.mark.asyncio
async def test_corrupt_document_is_a_storage_error(tmp_path) -> None:
    path = tmp_path / "orders.json"
    path.write_text("{not json")

    with pytest.raises(StorageError):
        await JsonCollection(path).read_all()
