"""FastAPI dependencies for bearer authentication and role checks."""


from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.security import Identity, decode_access_token
from app.db.base import get_db
from app.services.account import AccountService

# auto_error=False so a missing header goes through our error envelope
bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Verify the bearer token and re-load the account behind it."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    try:
        payload = decode_access_token(
            credentials.credentials,
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
    except ValueError as exc:
        raise UnauthorizedError(str(exc)) from exc
    return await AccountService(session).resolve_identity(payload["sub"])


async def require_official(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not identity.is_official:
        raise ForbiddenError("Official privilege required")
    return identity
