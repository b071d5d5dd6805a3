import shutil
import tempfile

import pytest

from configrepo.repository import ConfigRepository, RepositoryConfig
from configrepo.storage import MemoryStorage


class RecordingStorage(MemoryStorage):
    """MemoryStorage that records every call made against it"""

    def __init__(self, files=None):
        super().__init__(files)
        self.calls = []

    def open(self, path):
        self.calls.append(("open", path))
        return super().open(path)

    def create(self, path):
        self.calls.append(("create", path))
        return super().create(path)

    def stat(self, path):
        self.calls.append(("stat", path))
        return super().stat(path)


@pytest.fixture
def temp_config_dir():
    """Create a temporary config directory for tests"""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def recording_storage():
    return RecordingStorage()


@pytest.fixture
def make_repo(memory_storage):
    """Build a repository over memory storage with an explicit path"""

    def _make(file_path="test.json", storage=None):
        config = RepositoryConfig(
            file_path=file_path,
            storage=storage if storage is not None else memory_storage,
            args=["test"],
        )
        return ConfigRepository(config)

    return _make
