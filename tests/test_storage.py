# ABOUTME: Tests for the storage backends used by the config repository
# ABOUTME: Validates memory, read-only, and OS filesystem open/create/stat behavior
from pathlib import Path

import pytest

from configrepo.storage import FileInfo, MemoryStorage, OsStorage, ReadOnlyStorage


class TestMemoryStorage:
    def test_create_write_open(self):
        storage = MemoryStorage()

        with storage.create("a.json") as f:
            f.write(b'{"a": 1}')

        with storage.open("a.json") as f:
            assert f.read() == b'{"a": 1}'
        assert storage.stat("a.json") == FileInfo(path="a.json", size=8)

    def test_created_file_exists_before_close(self):
        storage = MemoryStorage()

        f = storage.create("a.json")
        assert storage.exists("a.json")
        assert storage.stat("a.json").size == 0

        f.write(b"{}")
        f.flush()
        assert storage.read_bytes("a.json") == b"{}"
        f.close()

    def test_create_truncates(self):
        storage = MemoryStorage({"a.json": b"old content"})

        with storage.create("a.json") as f:
            f.write(b"new")

        assert storage.read_bytes("a.json") == b"new"

    def test_missing_path(self):
        storage = MemoryStorage()

        with pytest.raises(FileNotFoundError):
            storage.open("missing.json")
        with pytest.raises(FileNotFoundError):
            storage.stat("missing.json")


class TestReadOnlyStorage:
    def test_reads_delegate(self):
        inner = MemoryStorage({"a.json": b"{}"})
        storage = ReadOnlyStorage(inner)

        with storage.open("a.json") as f:
            assert f.read() == b"{}"
        assert storage.stat("a.json").size == 2

    def test_create_refused(self):
        inner = MemoryStorage()
        storage = ReadOnlyStorage(inner)

        with pytest.raises(PermissionError):
            storage.create("a.json")
        assert not inner.exists("a.json")


class TestOsStorage:
    def test_round_trip(self, temp_config_dir):
        path = str(Path(temp_config_dir) / "prod.json")
        storage = OsStorage()

        with storage.create(path) as f:
            f.write(b'{"name": "x"}')

        with storage.open(path) as f:
            assert f.read() == b'{"name": "x"}'
        assert storage.stat(path).size == 13

    def test_missing_path(self, temp_config_dir):
        path = str(Path(temp_config_dir) / "missing.json")

        with pytest.raises(FileNotFoundError):
            OsStorage().open(path)
        with pytest.raises(FileNotFoundError):
            OsStorage().stat(path)

    def test_create_in_missing_directory(self, temp_config_dir):
        path = str(Path(temp_config_dir) / "nested" / "prod.json")

        with pytest.raises(FileNotFoundError):
            OsStorage().create(path)
