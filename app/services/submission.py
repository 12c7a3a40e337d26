"""Submission service — turns a form payload plus documents into one application.

All or nothing:
  1. validate department, form payload and document presence (no writes yet)
  2. stage the documents to durable storage
  3. insert the application row and one document row per staged file
  4. commit, then keep the staged files

A failure in step 2 surfaces as StageError with no transaction opened. A
failure in steps 3-4 rolls the transaction back and deletes the staged
files before surfacing PersistenceError, so no application exists without
its documents and no stored file outlives a failed submission. A
cancelled submission is cleaned up the same way and the CancelledError
propagates unchanged.
"""


import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PersistenceError, ValidationError
from app.repositories.application import ApplicationRepository, NewDocument
from app.schemas.forms import parse_department, parse_form_payload, serialize_form
from app.services.document_stage import DocumentStage, RawFile

logger = logging.getLogger(__name__)


class SubmissionService:
    def __init__(self, session: AsyncSession, stage: DocumentStage):
        self._session = session
        self._repo = ApplicationRepository(session)
        self._stage = stage

    async def submit(
        self,
        account_id: int,
        department: str | None,
        form_payload: str | dict[str, Any] | None,
        raw_files: Sequence[RawFile] | None,
    ) -> int:
        """Create an application in PendingVerification; returns its id."""
        dept = parse_department(department)
        form = parse_form_payload(dept, form_payload)
        if not raw_files:
            raise ValidationError("At least one supporting document is required")

        batch = await self._stage.stage(raw_files)
        async with batch:
            try:
                application = await self._repo.create_with_documents(
                    account_id=account_id,
                    department=dept.value,
                    form_data=serialize_form(form),
                    documents=[
                        NewDocument(
                            file_name=f.original_name,
                            storage_path=f.storage_path,
                            mime_type=f.media_type,
                            size_bytes=f.size,
                        )
                        for f in batch.files
                    ],
                )
                application_id = application.id
                await self._session.commit()
            except asyncio.CancelledError:
                await self._session.rollback()
                logger.warning(
                    "Submission by account %s cancelled; rolled back, discarding %d document(s)",
                    account_id, len(batch.files),
                )
                raise
            except Exception as exc:
                await self._session.rollback()
                logger.exception(
                    "Submission by account %s failed after staging %d document(s); rolling back",
                    account_id, len(batch.files),
                )
                raise PersistenceError() from exc
            batch.commit()

        logger.info(
            "Application %s submitted by account %s (%s, %d document(s))",
            application_id, account_id, dept.value, len(batch.files),
        )
        return application_id
