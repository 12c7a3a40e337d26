"""Official-only endpoints: cross-vendor listing and status changes.

The router-level ``require_official`` dependency runs before request bodies
are validated, so a vendor gets 403 whatever it sends.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_identity, get_settings, require_official
from app.core.config import Settings
from app.core.response import DataResponse
from app.core.security import Identity
from app.db.base import get_db
from app.schemas.application import OfficialApplicationSummary, StatusChangeRequest
from app.schemas.common import MessageResponse
from app.services.status import StatusTransitionService
from app.services.visibility import ApplicationQueryService

router = APIRouter(
    prefix="/official",
    tags=["Official"],
    dependencies=[Depends(require_official)],
)


@router.get("/applications", response_model=DataResponse[list[OfficialApplicationSummary]])
async def list_all_applications(
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Every application across all vendors, newest first."""
    rows = await ApplicationQueryService(session, settings.public_base_url).list_all(identity)
    return {"data": [OfficialApplicationSummary.model_validate(r) for r in rows]}


@router.put("/applications/{application_id}/status", response_model=DataResponse[MessageResponse])
async def change_application_status(
    application_id: int,
    body: StatusChangeRequest,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    svc = StatusTransitionService(
        session, require_rejection_reason=settings.require_rejection_reason
    )
    new_status = await svc.change_status(
        identity, application_id, body.status, body.rejection_reason
    )
    return {"data": {"message": f"Application status updated to {new_status.value}"}}
