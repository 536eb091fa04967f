"""Tests for FileStore - flat-file JSON backend."""
import asyncio
import json
import os
from typing import Any
from unittest.mock import patch

import pytest

from record_store.backends.base import Backend
from record_store.backends.file import FileStore
from record_store.errors import NotSavedError
from record_store.models import ABSENT, Record


class Basic(Record):
    collection = "basics"

    def to_object(self) -> dict[str, Any]:
        return dict(self.data)


@pytest.fixture
def root(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def store(root):
    return FileStore(root)


@pytest.fixture
def collection_dir(root):
    path = root / "basics"
    path.mkdir(parents=True)
    return path


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


class TestFileStore:
    def test_is_subclass_of_backend(self):
        assert issubclass(FileStore, Backend)

    def test_folder_paths(self, store, root):
        assert store.folder_paths(Basic) == [str(root), os.path.join(str(root), "basics")]


class TestGet:
    async def test_missing_file_returns_none(self, store):
        assert await store.get(Basic, "1") is None

    async def test_returns_new_instance(self, store, collection_dir):
        write_json(collection_dir / "1.json", {"foo": "bar"})
        record = await store.get(Basic, "1")
        assert isinstance(record, Basic)
        assert record.data == {"foo": "bar"}

    async def test_parse_failure_returns_none(self, store, collection_dir):
        (collection_dir / "1.json").write_text('{"foo": bar ;}', encoding="utf-8")
        assert await store.get(Basic, "1") is None

    async def test_non_object_json_returns_none(self, store, collection_dir):
        write_json(collection_dir / "1.json", [1, 2, 3])
        assert await store.get(Basic, "1") is None

    async def test_reads_id_from_file(self, store, collection_dir):
        write_json(collection_dir / "abc.json", {"_id": "abc", "foo": 1})
        record = await store.get(Basic, "abc")
        assert record.id == "abc"


class TestGetBy:
    async def test_missing_directory_returns_none(self, store):
        assert await store.get_by(Basic, "sdef", "sg") is None

    async def test_returns_matching_record(self, store, collection_dir):
        write_json(collection_dir / "1.json", {"key": "a"})
        write_json(collection_dir / "2.json", {"key": "b"})
        record = await store.get_by(Basic, "key", "b")
        assert isinstance(record, Basic)
        assert record.data == {"key": "b"}

    async def test_no_match_returns_none(self, store, collection_dir):
        write_json(collection_dir / "1.json", {"key": "a"})
        write_json(collection_dir / "2.json", {"key": "b"})
        assert await store.get_by(Basic, "key", "z") is None

    async def test_skips_temp_files(self, store, collection_dir):
        write_json(collection_dir / "x.json.0f3a.tmp", {"key": "a", "_id": "stale"})
        write_json(collection_dir / "x.json", {"key": "b", "_id": "x"})
        assert await store.get_by(Basic, "key", "a") is None
        assert (await store.get_by(Basic, "key", "b")).id == "x"

    async def test_skips_unparsable_files(self, store, collection_dir):
        write_json(collection_dir / "1.json", {"key1": "abcgfd"})
        (collection_dir / "2.json").write_text("{wetfrg:}", encoding="utf-8")
        write_json(collection_dir / "3.json", {"key1": "gh"})
        write_json(collection_dir / "4.json", {"key1": "abc"})
        record = await store.get_by(Basic, "key1", "gh")
        assert record.data == {"key1": "gh"}

    async def test_returns_only_first_found(self, store, collection_dir):
        write_json(collection_dir / "1.json", {"key": "rwse4yhg", "george": 1})
        write_json(collection_dir / "2.json", {"key": "rwse4yhg", "lucas": 1})
        record = await store.get_by(Basic, "key", "rwse4yhg")
        assert record.data == {"key": "rwse4yhg", "george": 1}

    async def test_none_value_requires_present_field(self, store, collection_dir):
        write_json(collection_dir / "1.json", {"other": 1})
        write_json(collection_dir / "2.json", {"key": None})
        record = await store.get_by(Basic, "key", None)
        assert record.data == {"key": None}


class TestGetAll:
    async def test_missing_directory_returns_empty(self, store):
        assert await store.get_all(Basic) == []

    async def test_empty_directory_returns_empty(self, store, collection_dir):
        assert await store.get_all(Basic) == []

    async def test_ignores_non_json_files(self, store, collection_dir):
        write_json(collection_dir / "a.json", {"_id": "a"})
        (collection_dir / "notes.txt").write_text("hello", encoding="utf-8")
        with patch.object(store, "get", wraps=store.get) as spy:
            records = await store.get_all(Basic)
        assert [r.id for r in records] == ["a"]
        spy.assert_called_once_with(Basic, "a")

    async def test_calls_get_per_entry(self, store, collection_dir):
        for name in ("a", "b", "c"):
            write_json(collection_dir / f"{name}.json", {"_id": name})
        with patch.object(store, "get", wraps=store.get) as spy:
            await store.get_all(Basic)
        assert spy.call_count == 3
        spy.assert_any_call(Basic, "a")
        spy.assert_any_call(Basic, "b")
        spy.assert_any_call(Basic, "c")

    async def test_preserves_listing_order(self, store, collection_dir):
        for name in ("c", "a", "b"):
            write_json(collection_dir / f"{name}.json", {"_id": name})
        records = await store.get_all(Basic)
        assert [r.id for r in records] == ["a", "b", "c"]

    async def test_drops_unparsable_entries(self, store, collection_dir):
        write_json(collection_dir / "a.json", {"_id": "a"})
        (collection_dir / "b.json").write_text("{oops", encoding="utf-8")
        records = await store.get_all(Basic)
        assert [r.id for r in records] == ["a"]


class TestSave:
    async def test_creates_all_folders(self, store, root):
        await store.save(Basic({"foo": 1}))
        assert root.is_dir()
        assert (root / "basics").is_dir()

    async def test_existing_folders_are_fine(self, store, collection_dir):
        record = await store.save(Basic({"foo": 1}))
        assert (collection_dir / f"{record.id}.json").exists()

    async def test_nested_root_is_created(self, tmp_path):
        store = FileStore(tmp_path / "a" / "b")
        record = await store.save(Basic({"foo": 1}))
        assert (tmp_path / "a" / "b" / "basics" / f"{record.id}.json").exists()

    async def test_unsaved_generates_object_id(self, store, root):
        record = Basic()
        record.to_object = lambda: {"foo": 1, "bar": ABSENT}
        await store.save(record)
        assert record.id is not None
        assert len(record.id) == 24
        int(record.id, 16)
        path = root / "basics" / f"{record.id}.json"
        assert json.loads(path.read_text(encoding="utf-8")) == {"foo": 1, "_id": record.id}

    async def test_generates_id_with_object_id(self, store, root):
        with patch("record_store.backends.file.ObjectId") as object_id:
            object_id.return_value.__str__.return_value = "2343635erygbh5"
            record = await store.save(Basic({"fudgead": "popsicle"}))
        assert record.id == "2343635erygbh5"
        assert (root / "basics" / "2343635erygbh5.json").exists()

    async def test_saved_overwrites_existing_file(self, store, collection_dir):
        write_json(collection_dir / "q3etwgjrhnft.json", {"_id": "q3etwgjrhnft", "old": True})
        record = Basic({"_id": "q3etwgjrhnft", "fudge": "popsicle"})
        await store.save(record)
        path = collection_dir / "q3etwgjrhnft.json"
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "_id": "q3etwgjrhnft",
            "fudge": "popsicle",
        }

    async def test_strips_absent_keys(self, store, collection_dir):
        record = Basic({"_id": "x"})
        record.to_object = lambda: {"foo": "123", "baz": ABSENT, "bar": ABSENT}
        await store.save(record)
        data = json.loads((collection_dir / "x.json").read_text(encoding="utf-8"))
        assert data == {"foo": "123", "_id": "x"}

    async def test_pretty_prints_with_two_spaces(self, store, collection_dir):
        record = Basic({"_id": "x", "foo": "123"})
        await store.save(record)
        text = (collection_dir / "x.json").read_text(encoding="utf-8")
        assert text == json.dumps({"_id": "x", "foo": "123"}, indent=2)

    async def test_no_temp_file_left(self, store, collection_dir):
        await store.save(Basic({"_id": "x"}))
        assert sorted(p.name for p in collection_dir.iterdir()) == ["x.json"]

    async def test_concurrent_saves_of_one_id(self, store, collection_dir):
        for _ in range(10):
            results = await asyncio.gather(
                *(store.save(Basic({"_id": "x", "n": n})) for n in range(8)),
                return_exceptions=True,
            )
            assert [r for r in results if isinstance(r, BaseException)] == []
            data = json.loads((collection_dir / "x.json").read_text(encoding="utf-8"))
            assert data["_id"] == "x"
            assert data["n"] in range(8)
        assert sorted(p.name for p in collection_dir.iterdir()) == ["x.json"]

    async def test_returns_record(self, store):
        record = Basic()
        assert await store.save(record) is record

    async def test_updates_data_with_written_payload(self, store):
        record = Basic({"foo": 1})
        await store.save(record)
        assert record.data == {"foo": 1, "_id": record.id}

    async def test_roundtrip(self, store):
        record = Basic({"foo": 1, "nested": {"a": [1, 2]}, "none": None})
        await store.save(record)
        loaded = await store.get(Basic, record.id)
        assert loaded.data == {"foo": 1, "nested": {"a": [1, 2]}, "none": None, "_id": record.id}


class TestDelete:
    async def test_unsaved_raises(self, store):
        with pytest.raises(NotSavedError, match="Data has not been saved"):
            await store.delete(Basic())

    async def test_removes_file(self, store, collection_dir):
        record = await store.save(Basic({"_id": "wr43yeht"}))
        await store.delete(record)
        assert not (collection_dir / "wr43yeht.json").exists()

    async def test_missing_file_is_noop(self, store):
        await store.delete(Basic({"_id": "qe3tw4ryhdt"}))  # Should not raise

    async def test_delete_twice(self, store):
        record = await store.save(Basic({"foo": 1}))
        await store.delete(record)
        await store.delete(record)  # Should not raise
        assert await store.get(Basic, record.id) is None


class TestIsSaved:
    def test_depends_on_id(self, store):
        record = Basic()
        assert store.is_saved(record) is False
        record.id = "1"
        assert store.is_saved(record) is True
        record.id = None
        assert store.is_saved(record) is False
