"""
Unit tests for the JSON-backed persistent map.
"""

import json
import os
import tempfile

import pytest

from topictracker.models.language import Language
from topictracker.models.topic import Topic
from topictracker.utils.storage import PersistentMap


def make_map(path):
    return PersistentMap(path, Language.from_dict, Language.to_dict, lambda lang: lang.id)


def test_in_memory_map():
    """Test map without a backing file."""
    storage = make_map(None)

    assert storage.insert("1", Language(id="1", title="Go")) is None
    assert storage.get("1") == Language(id="1", title="Go")
    assert "1" in storage
    assert len(storage) == 1


def test_insert_returns_previous_value():
    storage = make_map(None)
    storage.insert("1", Language(id="1", title="Go"))

    previous = storage.insert("1", Language(id="1", title="Golang"))

    assert previous.title == "Go"
    assert storage.get("1").title == "Golang"
    assert len(storage) == 1


def test_remove():
    """Test removing present and absent keys."""
    storage = make_map(None)
    storage.insert("1", Language(id="1", title="Go"))

    removed = storage.remove("1")
    assert removed.title == "Go"
    assert storage.get("1") is None

    # Absent key
    assert storage.remove("1") is None


def test_values():
    storage = make_map(None)
    storage.insert("1", Language(id="1", title="Go"))
    storage.insert("2", Language(id="2", title="Rust"))

    titles = {lang.title for lang in storage.values()}
    assert titles == {"Go", "Rust"}


def test_save_and_load():
    """Test persistence across instances."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "languages.json")

        storage1 = make_map(path)
        storage1.insert("1", Language(id="1", title="Go"))
        storage1.insert("2", Language(id="2", title="Rust"))
        storage1.remove("2")

        storage2 = make_map(path)

        assert len(storage2) == 1
        assert storage2.get("1") == Language(id="1", title="Go")


def test_file_format():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "languages.json")
        storage = make_map(path)
        storage.insert("1", Language(id="1", title="Go"))

        with open(path) as f:
            data = json.load(f)

        assert data["version"] == "1.0.0"
        assert data["records"] == [{"id": "1", "title": "Go"}]
        assert not os.path.exists(f"{path}.tmp")


def test_creates_missing_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "nested", "languages.json")
        storage = make_map(path)
        storage.insert("1", Language(id="1", title="Go"))

        assert os.path.exists(path)


def test_restore_from_backup():
    """Test that a corrupted file is recovered from its backup."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "languages.json")

        storage = make_map(path)
        storage.insert("1", Language(id="1", title="Go"))
        # Second write leaves the first state in the backup
        storage.insert("2", Language(id="2", title="Rust"))

        with open(path, "w") as f:
            f.write("{ not json")

        restored = make_map(path)

        assert restored.get("1") == Language(id="1", title="Go")
        assert restored.get("2") is None


def test_corrupted_without_backup_starts_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "languages.json")
        with open(path, "w") as f:
            f.write("garbage")

        storage = make_map(path)

        assert len(storage) == 0


def test_invalid_utf8_without_backup_starts_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "languages.json")
        with open(path, "wb") as f:
            f.write(b'{"records": [\xff\xfe]}')

        storage = make_map(path)

        assert len(storage) == 0


def test_invalid_utf8_restores_from_backup():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "languages.json")
        storage = make_map(path)
        storage.insert("1", Language(id="1", title="Go"))
        storage.insert("2", Language(id="2", title="Rust"))

        with open(path, "wb") as f:
            f.write(b'\xff\xfe\xfd')

        restored = make_map(path)

        assert restored.get("1") == Language(id="1", title="Go")


def test_invalid_record_value_restores_from_backup():
    """A topic with a non-boolean closed flag is treated as a corrupted file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "topics.json")
        storage = PersistentMap(path, Topic.from_dict, Topic.to_dict, lambda t: t.id)
        storage.insert("1", Topic(id="1", title="Syntax", closed=False, language_id="go"))
        storage.insert("2", Topic(id="2", title="Channels", closed=True, language_id="go"))

        with open(path, "w") as f:
            json.dump({"records": [
                {"id": "1", "title": "Syntax", "closed": "false", "language_id": "go"}
            ]}, f)

        restored = PersistentMap(path, Topic.from_dict, Topic.to_dict, lambda t: t.id)

        assert restored.get("1").closed is False
        assert restored.get("2") is None


def test_remove_many():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "languages.json")
        storage = make_map(path)
        for key, title in (("1", "Go"), ("2", "Rust"), ("3", "Zig")):
            storage.insert(key, Language(id=key, title=title))

        removed = storage.remove_many(["1", "3", "missing"])

        assert {lang.title for lang in removed} == {"Go", "Zig"}
        assert [lang.title for lang in make_map(path).values()] == ["Rust"]
        assert storage.remove_many([]) == []


def test_remove_many_writes_once(monkeypatch):
    storage = make_map(None)
    for key in ("1", "2", "3"):
        storage.insert(key, Language(id=key, title=key))

    saves = []
    monkeypatch.setattr(storage, "save", lambda: saves.append(1))

    storage.remove_many(["1", "2", "3"])

    assert len(saves) == 1
    assert len(storage) == 0


def test_remove_many_failed_save_removes_nothing(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "languages.json")
        storage = make_map(path)
        storage.insert("1", Language(id="1", title="Go"))
        storage.insert("2", Language(id="2", title="Rust"))

        def failing_save():
            raise OSError("disk full")

        monkeypatch.setattr(storage, "save", failing_save)

        with pytest.raises(OSError):
            storage.remove_many(["1", "2"])

        assert {lang.title for lang in storage.values()} == {"Go", "Rust"}
        assert len(make_map(path)) == 2


def test_failed_save_keeps_memory_unchanged(monkeypatch):
    """Test that a write failure does not leave a half-applied change."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "languages.json")
        storage = make_map(path)
        storage.insert("1", Language(id="1", title="Go"))

        def failing_save():
            raise OSError("disk full")

        monkeypatch.setattr(storage, "save", failing_save)

        with pytest.raises(OSError):
            storage.insert("2", Language(id="2", title="Rust"))
        with pytest.raises(OSError):
            storage.insert("1", Language(id="1", title="Golang"))
        with pytest.raises(OSError):
            storage.remove("1")

        assert storage.get("2") is None
        assert storage.get("1").title == "Go"


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
