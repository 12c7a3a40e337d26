"""Document stage — writes uploaded files to durable storage for a submission.

``stage()`` either returns a :class:`StagedBatch` holding every file of the
call, or raises :class:`StageError` after deleting whatever it had already
written. The batch is an async context manager: files are discarded on exit
unless :meth:`StagedBatch.commit` was called, which the submission service
does only after its database transaction commits.

Rule: No SQLAlchemy / no FastAPI here.
"""


import asyncio
import logging
import os
import re
import time
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from app.core.exceptions import StageError, ValidationError
from app.storage.protocol import DocumentStorage

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class RawFile:
    """One uploaded file as received from the transport layer."""

    filename: str
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StagedFile:
    original_name: str
    storage_path: str
    media_type: str | None
    size: int


def safe_filename(filename: str) -> str:
    """Reduce a client-supplied filename to a safe basename for storage keys."""
    name = os.path.basename((filename or "").replace("\\", "/")).replace("\x00", "")
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name[:120] or "document"


def make_storage_key(filename: str) -> str:
    """Time-based prefix + random component + original name; unique per call."""
    return f"{time.time_ns()}-{uuid.uuid4().hex[:8]}-{safe_filename(filename)}"


class StagedBatch:
    """Files written by one ``stage()`` call, deleted on exit unless committed."""

    def __init__(self, storage: DocumentStorage, files: list[StagedFile]):
        self._storage = storage
        self.files = files
        self._committed = False

    @property
    def committed(self) -> bool:
        return self._committed

    def commit(self) -> None:
        """Keep the files; called once their document rows are committed."""
        self._committed = True

    async def discard(self) -> None:
        """Delete every staged file. Keeps going past individual failures."""
        for staged in self.files:
            try:
                await self._storage.delete(staged.storage_path)
            except Exception:
                logger.exception("Failed to delete staged document %s", staged.storage_path)
        logger.info("Discarded %d staged document(s)", len(self.files))

    async def __aenter__(self) -> "StagedBatch":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if not self._committed:
            await self.discard()
        return False


class DocumentStage:
    def __init__(self, storage: DocumentStorage, max_files: int = 5):
        self._storage = storage
        self._max_files = max_files

    async def stage(self, files: Sequence[RawFile]) -> StagedBatch:
        """Write *files* to storage, all or nothing.

        Raises:
            ValidationError: more files than the per-submission cap.
            StageError: a write failed; files already written by this call
                have been deleted.
        """
        if len(files) > self._max_files:
            raise ValidationError(
                f"At most {self._max_files} documents may be submitted per application"
            )

        batch = StagedBatch(self._storage, [])
        try:
            for raw in files:
                path = await self._storage.write(make_storage_key(raw.filename), raw.data)
                batch.files.append(
                    StagedFile(
                        original_name=raw.filename,
                        storage_path=path,
                        media_type=raw.content_type,
                        size=raw.size,
                    )
                )
        except asyncio.CancelledError:
            await batch.discard()
            raise
        except Exception as exc:
            logger.error(
                "Staging failed on document %d of %d: %s",
                len(batch.files) + 1, len(files), exc,
            )
            await batch.discard()
            raise StageError() from exc
        return batch
