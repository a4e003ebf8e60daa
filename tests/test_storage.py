import json

import pytest

from database.manager import LocalStore
from database.storage import FileStorage, MemoryStorage, StorageError


def test_memory_storage_roundtrip():
    storage = MemoryStorage()

    assert storage.get_item("k") is None
    storage.set_item("k", "v")
    assert storage.get_item("k") == "v"
    storage.remove_item("k")
    storage.remove_item("k")
    assert storage.get_item("k") is None


def test_file_storage_writes_one_file_per_key(tmp_path):
    storage = FileStorage(tmp_path)
    storage.set_item("alpha", '{"a": 1}')

    assert storage.path_for("alpha") == tmp_path / "alpha.json"
    assert (tmp_path / "alpha.json").read_text(encoding="utf-8") == '{"a": 1}'
    assert not list(tmp_path.glob("*.tmp"))


def test_file_storage_missing_key_and_remove(tmp_path):
    storage = FileStorage(tmp_path)

    assert storage.get_item("missing") is None
    storage.set_item("k", "v")
    storage.remove_item("k")
    assert not (tmp_path / "k.json").exists()


def test_file_storage_write_failure_raises_storage_error(tmp_path):
    storage = FileStorage(tmp_path)
    # Каталог на месте файла делает запись невозможной
    (tmp_path / "blocked.json").mkdir()

    with pytest.raises(StorageError):
        storage.set_item("blocked", "{}")


def test_file_store_persists_across_instances(file_store, tmp_path):
    file_store.save_habit("U", {"id": "h1", "name": "Stretch"})
    file_store.save_habit_entry("U", "h1", "2024-01-01", 1, note="ёлка")

    reopened = LocalStore(FileStorage(tmp_path / "data"))

    assert reopened.get_habit("U", "h1").name == "Stretch"
    assert reopened.get_habit_entry("U", "h1", "2024-01-01").note == "ёлка"


def test_file_store_tolerates_corrupted_file(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "master-mausam-data.json").write_text("\x00garbage", encoding="utf-8")
    store = LocalStore(FileStorage(data_dir))

    assert store.get_habits("U") == []

    store.save_habit("U", {"id": "h1"})
    data = json.loads((data_dir / "master-mausam-data.json").read_text(encoding="utf-8"))
    assert len(data["habits"]) == 1
