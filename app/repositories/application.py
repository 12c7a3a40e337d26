"""Application repository — owns the application and document tables.

The submission path inserts one application plus its documents inside the
caller's transaction; the review path performs a single-row status update.
Listing queries join the owning account so summaries carry the company
name and public vendor id without a second round trip.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.domain.account import Account
from app.domain.application import Application, Document
from app.domain.enums import ApplicationStatus
from app.repositories.base import BaseRepository


@dataclass(frozen=True)
class ApplicationRow:
    """Application joined with its owner's public attributes."""

    id: int
    account_id: int
    department: str
    status: str
    rejection_reason: str | None
    created_at: datetime
    company_name: str
    vendor_unique_id: str


@dataclass(frozen=True)
class NewDocument:
    file_name: str
    storage_path: str
    mime_type: str | None
    size_bytes: int | None = None


class ApplicationRepository(BaseRepository[Application]):
    model = Application

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create_with_documents(
        self,
        *,
        account_id: int,
        department: str,
        form_data: dict[str, Any],
        documents: Sequence[NewDocument],
    ) -> Application:
        """Insert the application row and one row per document, then flush.

        Does not commit; both inserts become visible together at the
        caller's commit.
        """
        application = Application(
            account_id=account_id,
            department=department,
            form_data=form_data,
            status=ApplicationStatus.PENDING_VERIFICATION.value,
        )
        self._session.add(application)
        await self._session.flush()  # populate application.id

        self._session.add_all(
            Document(
                application_id=application.id,
                file_name=doc.file_name,
                storage_path=doc.storage_path,
                mime_type=doc.mime_type,
                size_bytes=doc.size_bytes,
            )
            for doc in documents
        )
        await self._session.flush()
        return application

    async def set_status(
        self, application_id: int, status: ApplicationStatus, rejection_reason: str | None
    ) -> bool:
        matched = await self.update(
            application_id, status=status.value, rejection_reason=rejection_reason
        )
        return matched > 0

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _joined_query(self):
        return (
            select(
                Application.id,
                Application.account_id,
                Application.department,
                Application.status,
                Application.rejection_reason,
                Application.created_at,
                Account.company_name,
                Account.unique_id.label("vendor_unique_id"),
            )
            .join(Account, Application.account_id == Account.id)
            .order_by(Application.created_at.desc(), Application.id.desc())
        )

    async def list_for_account(self, account_id: int) -> list[ApplicationRow]:
        result = await self._session.execute(
            self._joined_query().where(Application.account_id == account_id)
        )
        return [ApplicationRow(**row._mapping) for row in result.all()]

    async def list_all(self) -> list[ApplicationRow]:
        result = await self._session.execute(self._joined_query())
        return [ApplicationRow(**row._mapping) for row in result.all()]

    async def get_with_details(
        self, application_id: int, *, owner_id: int | None = None
    ) -> Application | None:
        """Load an application with its owner and documents.

        When *owner_id* is given the row is only returned if it belongs to
        that account, so a foreign application looks exactly like a missing one.
        """
        q = (
            select(Application)
            .where(Application.id == application_id)
            .options(
                selectinload(Application.account),
                selectinload(Application.documents),
            )
            .execution_options(populate_existing=True)
        )
        if owner_id is not None:
            q = q.where(Application.account_id == owner_id)
        result = await self._session.execute(q)
        return result.scalars().first()

    async def get_document(self, application_id: int, document_id: int) -> Document | None:
        result = await self._session.execute(
            select(Document)
            .where(Document.id == document_id)
            .where(Document.application_id == application_id)
        )
        return result.scalars().first()
