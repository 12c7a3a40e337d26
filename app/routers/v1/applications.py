"""Application submission and read endpoints for vendors (and officials).

Pattern:
  1. Inject DB session + current identity via Depends
  2. Read and vet uploads here (HTTP concern); business rules live in services
  3. Wrap results in the `{ data: ... }` envelope
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_identity, get_settings
from app.core.config import Settings
from app.core.exceptions import (
    NotFoundError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    ValidationError,
)
from app.core.response import DataResponse
from app.core.security import Identity
from app.db.base import get_db
from app.domain.application import Application
from app.domain.enums import ApplicationStatus
from app.schemas.application import (
    ApplicationDetail,
    ApplicationSummary,
    DocumentOut,
    SubmissionOut,
)
from app.services.document_stage import DocumentStage, RawFile, safe_filename
from app.services.submission import SubmissionService
from app.services.visibility import ApplicationQueryService

router = APIRouter(prefix="/applications", tags=["Applications"])

_ALLOWED_EXTENSIONS = (".pdf", ".doc", ".docx", ".jpg", ".jpeg", ".png")


# ------------------------------------------------------------------
# Upload handling (HTTP concern — stays in the router)
# ------------------------------------------------------------------

async def _read_upload(file: UploadFile, settings: Settings) -> RawFile:
    filename = file.filename or ""
    if not filename.lower().endswith(_ALLOWED_EXTENSIONS):
        accepted = ", ".join(_ALLOWED_EXTENSIONS)
        raise UnsupportedMediaTypeError(
            f"Unsupported file type for '{filename}'. Accepted formats: {accepted}"
        )

    contents = await file.read()
    if len(contents) == 0:
        raise ValidationError(f"Uploaded file '{filename}' is empty")
    if len(contents) > settings.max_upload_size_bytes:
        raise PayloadTooLargeError(
            f"'{filename}' exceeds the {settings.max_upload_size_mb}MB limit"
        )
    return RawFile(filename=filename, content_type=file.content_type, data=contents)


def _query_svc(session: AsyncSession, settings: Settings) -> ApplicationQueryService:
    return ApplicationQueryService(session, settings.public_base_url)


def _detail(svc: ApplicationQueryService, application: Application) -> ApplicationDetail:
    return ApplicationDetail(
        id=application.id,
        account_id=application.account_id,
        department=application.department,
        form_data=application.form_data,
        status=application.status,
        rejection_reason=application.rejection_reason,
        created_at=application.created_at,
        company_name=application.account.company_name,
        vendor_unique_id=application.account.unique_id,
        documents=[
            DocumentOut(
                id=doc.id,
                file_name=doc.file_name,
                mime_type=doc.mime_type,
                size_bytes=doc.size_bytes,
                file_url=svc.document_url(application.id, doc.id),
            )
            for doc in application.documents
        ],
    )


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("", response_model=DataResponse[SubmissionOut], status_code=status.HTTP_201_CREATED)
async def submit_application(
    request: Request,
    department: Optional[str] = Form(default=None),
    form_data: Optional[str] = Form(default=None, alias="formData"),
    documents: Optional[list[UploadFile]] = File(default=None),
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Submit a department application with its supporting documents (multipart)."""
    documents = documents or []
    # Refuse oversized batches before buffering any file
    limit = settings.max_files_per_submission
    if len(documents) > limit:
        raise ValidationError(f"At most {limit} documents may be submitted per application")
    raw_files = [await _read_upload(f, settings) for f in documents]
    stage = DocumentStage(request.app.state.storage, settings.max_files_per_submission)
    application_id = await SubmissionService(session, stage).submit(
        identity.account_id, department, form_data, raw_files
    )
    return {
        "data": SubmissionOut(
            application_id=application_id,
            status=ApplicationStatus.PENDING_VERIFICATION,
            document_count=len(raw_files),
        )
    }


@router.get("/mine", response_model=DataResponse[list[ApplicationSummary]])
async def list_my_applications(
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """The caller's own applications, newest first."""
    rows = await _query_svc(session, settings).list_for_account(identity.account_id)
    return {"data": [ApplicationSummary.model_validate(r) for r in rows]}


@router.get("/{application_id}", response_model=DataResponse[ApplicationDetail])
async def get_application(
    application_id: int,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Application detail with documents; owner or official only."""
    svc = _query_svc(session, settings)
    application = await svc.get_by_id(application_id, identity)
    return {"data": _detail(svc, application)}


@router.get("/{application_id}/documents/{document_id}/content")
async def download_document(
    application_id: int,
    document_id: int,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Stream one stored document; same visibility rules as the application."""
    document = await _query_svc(session, settings).get_document(
        application_id, document_id, identity
    )
    storage = request.app.state.storage
    if not await storage.exists(document.storage_path):
        raise NotFoundError("Document", document_id)
    return StreamingResponse(
        storage.stream(document.storage_path),
        media_type=document.mime_type or "application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{safe_filename(document.file_name)}"'},
    )
