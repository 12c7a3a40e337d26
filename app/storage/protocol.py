"""Storage protocol. Implementations: LocalFileStorage."""

from collections.abc import AsyncIterator
from typing import Protocol


class DocumentStorage(Protocol):
    """Key/value blob store for uploaded documents."""

    async def write(self, key: str, data: bytes) -> str:
        """Persist *data* under *key* and return its storage path."""
        ...

    async def delete(self, path: str) -> bool:
        """Delete a stored file. Returns True if deleted, False if not found."""
        ...

    async def exists(self, path: str) -> bool:
        ...

    def stream(self, path: str) -> AsyncIterator[bytes]:
        """Stream stored content in chunks."""
        ...
