import json

from crypto_dashboard.backend.storage import LocalStorage


def test_missing_file_reads_as_empty(tmp_path):
    storage = LocalStorage(tmp_path / "missing" / "store.json")
    assert storage.get_item("anything") is None


def test_set_get_remove(tmp_path):
    path = tmp_path / "nested" / "store.json"
    storage = LocalStorage(path)
    storage.set_item("a", "1")
    storage.set_item("b", "2")
    assert storage.get_item("a") == "1"
    assert json.loads(path.read_text()) == {"a": "1", "b": "2"}

    storage.remove_item("a")
    storage.remove_item("not-there")
    assert storage.get_item("a") is None
    assert storage.get_item("b") == "2"


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json")
    storage = LocalStorage(path)
    assert storage.get_item("a") is None

    storage.set_item("a", "x")
    assert storage.get_item("a") == "x"


def test_non_object_file_reads_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2, 3]")
    assert LocalStorage(path).get_item("0") is None


def test_no_temp_files_left_behind(tmp_path):
    storage = LocalStorage(tmp_path / "store.json")
    storage.set_item("k", "v")
    assert [p.name for p in tmp_path.iterdir()] == ["store.json"]
