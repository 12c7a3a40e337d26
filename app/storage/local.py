"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path

import aiofiles
import aiofiles.os


class StoragePathError(ValueError):
    """Raised when a storage path escapes the storage root."""


class LocalFileStorage:
    """Stores documents under a single root directory.

    Storage paths are relative to the root; writes go to a temp file that is
    renamed into place so a reader never sees a half-written document.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _full_path(self, path: str) -> Path:
        full = (self.root / path).resolve()
        try:
            full.relative_to(self.root)
        except ValueError as e:
            raise StoragePathError(f"Path escapes storage root: {path}") from e
        return full

    async def write(self, key: str, data: bytes) -> str:
        target = self._full_path(key)
        if target.exists():
            raise FileExistsError(key)
        target.parent.mkdir(parents=True, exist_ok=True, mode=0o750)

        fd, tmp = tempfile.mkstemp(dir=target.parent, prefix=".tmp_")
        os.close(fd)
        try:
            async with aiofiles.open(tmp, "wb") as f:
                await f.write(data)
            os.chmod(tmp, 0o640)
            await aiofiles.os.rename(tmp, target)
        finally:
            if os.path.exists(tmp):
                os.unlink(tmp)
        return target.relative_to(self.root).as_posix()

    async def delete(self, path: str) -> bool:
        target = self._full_path(path)
        if not target.exists():
            return False
        await aiofiles.os.remove(target)
        return True

    async def exists(self, path: str) -> bool:
        try:
            return self._full_path(path).is_file()
        except StoragePathError:
            return False

    async def stream(self, path: str) -> AsyncIterator[bytes]:
        target = self._full_path(path)
        if not target.is_file():
            raise FileNotFoundError(path)
        async with aiofiles.open(target, "rb") as f:
            while True:
                chunk = await f.read(self.CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
