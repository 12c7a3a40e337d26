"""Visibility rules for reading applications.

Vendors see only their own applications; officials see everything. A
vendor asking for someone else's application gets the same NotFoundError
as for an id that does not exist.
"""


from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, NotFoundError
from app.core.security import Identity
from app.domain.application import Application, Document
from app.repositories.application import ApplicationRepository, ApplicationRow


class ApplicationQueryService:
    def __init__(self, session: AsyncSession, public_base_url: str = ""):
        self._repo = ApplicationRepository(session)
        self._base_url = public_base_url.rstrip("/")

    def document_url(self, application_id: int, document_id: int) -> str:
        return (
            f"{self._base_url}/api/v1/applications/{application_id}"
            f"/documents/{document_id}/content"
        )

    async def list_for_account(self, account_id: int) -> list[ApplicationRow]:
        """Applications owned by *account_id*, newest first."""
        return await self._repo.list_for_account(account_id)

    async def list_all(self, requester: Identity) -> list[ApplicationRow]:
        """Every application across all accounts, newest first. Officials only."""
        if not requester.is_official:
            raise ForbiddenError("Official privilege required")
        return await self._repo.list_all()

    async def get_by_id(self, application_id: int, requester: Identity) -> Application:
        """Application with owner and documents, if *requester* may read it."""
        owner_filter = None if requester.is_official else requester.account_id
        application = await self._repo.get_with_details(application_id, owner_id=owner_filter)
        if application is None:
            raise NotFoundError("Application", application_id)
        return application

    async def get_document(
        self, application_id: int, document_id: int, requester: Identity
    ) -> Document:
        await self.get_by_id(application_id, requester)
        document = await self._repo.get_document(application_id, document_id)
        if document is None:
            raise NotFoundError("Document", document_id)
        return document
