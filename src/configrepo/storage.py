# ABOUTME: Storage capability used by the repository for config file access
# ABOUTME: Real filesystem, in-memory, and read-only implementations of open/create/stat
"""Storage backends for configrepo"""

import errno
import io
import logging
import os
from dataclasses import dataclass
from typing import BinaryIO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileInfo:
    """What stat() reports about a stored file"""

    path: str
    size: int


class Storage:
    """
    Minimal filesystem interface.

    open() returns a binary handle for reading, create() a binary handle for
    writing (truncating any existing file). Both handles are context managers.
    Missing paths raise FileNotFoundError.
    """

    def open(self, path: str) -> BinaryIO:
        raise NotImplementedError

    def create(self, path: str) -> BinaryIO:
        raise NotImplementedError

    def stat(self, path: str) -> FileInfo:
        raise NotImplementedError


class OsStorage(Storage):
    """The real operating system filesystem."""

    def open(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def create(self, path: str) -> BinaryIO:
        return open(path, "wb")

    def stat(self, path: str) -> FileInfo:
        return FileInfo(path=path, size=os.stat(path).st_size)


class _MemoryFile(io.BytesIO):
    """Write handle that publishes its bytes to the owning MemoryStorage."""

    def __init__(self, storage: "MemoryStorage", path: str):
        super().__init__()
        self._storage = storage
        self._path = path

    def flush(self):
        super().flush()
        if not self.closed:
            self._storage._files[self._path] = self.getvalue()

    def close(self):
        if not self.closed:
            self._storage._files[self._path] = self.getvalue()
        super().close()


class MemoryStorage(Storage):
    """In-memory storage keyed by path, for tests and dry runs."""

    def __init__(self, files: dict[str, bytes] | None = None):
        self._files: dict[str, bytes] = dict(files or {})

    def _require(self, path: str) -> bytes:
        if path not in self._files:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
        return self._files[path]

    def open(self, path: str) -> BinaryIO:
        return io.BytesIO(self._require(path))

    def create(self, path: str) -> BinaryIO:
        self._files[path] = b""
        return _MemoryFile(self, path)

    def stat(self, path: str) -> FileInfo:
        return FileInfo(path=path, size=len(self._require(path)))

    def write_bytes(self, path: str, data: bytes) -> None:
        self._files[path] = bytes(data)

    def read_bytes(self, path: str) -> bytes:
        return self._require(path)

    def exists(self, path: str) -> bool:
        return path in self._files


class ReadOnlyStorage(Storage):
    """Wraps another storage and refuses every write."""

    def __init__(self, inner: Storage):
        self.inner = inner

    def open(self, path: str) -> BinaryIO:
        return self.inner.open(path)

    def create(self, path: str) -> BinaryIO:
        logger.debug(f"Refusing to create {path} on read-only storage")
        raise PermissionError(errno.EPERM, os.strerror(errno.EPERM), path)

    def stat(self, path: str) -> FileInfo:
        return self.inner.stat(path)
