"""Registration, login and profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_identity, get_settings
from app.core.config import Settings
from app.core.response import DataResponse
from app.core.security import Identity, create_access_token
from app.db.base import get_db
from app.schemas.account import AccountOut, LoginRequest, RegisterRequest, TokenOut
from app.services.account import AccountService, identity_for

router = APIRouter(tags=["Accounts"])


@router.post(
    "/auth/register",
    response_model=DataResponse[AccountOut],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(get_db),
):
    """Register a vendor account."""
    account = await AccountService(session).register(body)
    return {"data": AccountOut.model_validate(account)}


@router.post("/auth/login", response_model=DataResponse[TokenOut])
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Exchange credentials for a bearer token."""
    account = await AccountService(session).authenticate(body.email, body.password)
    token = create_access_token(
        identity_for(account),
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_expiry_minutes,
    )
    return {
        "data": TokenOut(
            access_token=token,
            expires_in=settings.jwt_expiry_minutes * 60,
            account=AccountOut.model_validate(account),
        )
    }


@router.get("/accounts/me", response_model=DataResponse[AccountOut])
async def my_profile(
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_db),
):
    account = await AccountService(session).get_account(identity.account_id)
    return {"data": AccountOut.model_validate(account)}
