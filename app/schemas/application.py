"""Application Pydantic schemas (submission result, summaries, detail, status change)."""


from datetime import datetime
from typing import Any

from pydantic import Field

from app.domain.enums import ApplicationStatus
from app.schemas.common import CamelModel

class SubmissionOut(CamelModel):
    application_id: int
    status: ApplicationStatus
    document_count: int

class ApplicationSummary(CamelModel):
    id: int
    department: str
    status: ApplicationStatus
    created_at: datetime

class OfficialApplicationSummary(ApplicationSummary):
    company_name: str
    vendor_unique_id: str

class DocumentOut(CamelModel):
    id: int
    file_name: str
    mime_type: str | None = None
    size_bytes: int | None = None
    file_url: str

class ApplicationDetail(CamelModel):
    id: int
    account_id: int
    department: str
    form_data: dict[str, Any]
    status: ApplicationStatus
    rejection_reason: str | None = None
    created_at: datetime
    company_name: str
    vendor_unique_id: str
    documents: list[DocumentOut]

class StatusChangeRequest(CamelModel):
    # Kept as a plain string so unknown values reach the transition engine
    status: str | None = None
    rejection_reason: str | None = Field(default=None, max_length=2000)
