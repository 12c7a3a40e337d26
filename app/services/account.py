"""Account service — the identity store consumed by the application workflow.

Registration, credential checks and identity resolution. Self-registration
always produces a vendor; officials are provisioned by scripts/seed_official.py.
"""


import logging
import secrets

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.core.security import Identity, hash_password, verify_password
from app.domain.account import Account
from app.repositories.account import AccountRepository
from app.schemas.account import RegisterRequest

logger = logging.getLogger(__name__)


def generate_unique_id(prefix: str = "VEN") -> str:
    return f"{prefix}-{secrets.token_hex(5).upper()}"


def identity_for(account: Account) -> Identity:
    return Identity(
        account_id=account.id,
        public_id=account.unique_id,
        role=account.role,
        official_title=account.official_title,
    )


class AccountService:
    def __init__(self, session: AsyncSession):
        self._repo = AccountRepository(session)

    async def register(
        self,
        data: RegisterRequest,
        *,
        is_official: bool = False,
        official_title: str | None = None,
    ) -> Account:
        email = data.email.lower()
        pan = data.pan_number or None
        gstin = data.gstin or None

        taken = await self._repo.find_conflicting_fields(
            email=email,
            mobile_number=data.mobile_number,
            pan_number=pan,
            gstin=gstin,
        )
        if taken:
            raise ConflictError(f"Already registered: {', '.join(taken)}")

        account = await self._repo.create_account(
            unique_id=generate_unique_id("OFF" if is_official else "VEN"),
            email=email,
            mobile_number=data.mobile_number,
            password_hash=hash_password(data.password),
            company_name=data.company_name,
            company_address=data.company_address,
            legal_structure=data.legal_structure,
            pan_number=pan,
            gstin=gstin,
            is_official=is_official,
            official_title=official_title if is_official else None,
        )
        logger.info("Registered %s account %s", account.role.value, account.unique_id)
        return account

    async def authenticate(self, email: str, password: str) -> Account:
        account = await self._repo.get_by_email(email.lower())
        if account is None or not verify_password(password, account.password_hash):
            raise UnauthorizedError("Invalid credentials")
        return account

    async def get_account(self, account_id: int) -> Account:
        account = await self._repo.get_by_id(account_id)
        if not account:
            raise NotFoundError("Account", account_id)
        return account

    async def resolve_identity(self, account_id: int) -> Identity:
        """Identity for a verified token subject; the account must still exist."""
        account = await self._repo.get_by_id(account_id)
        if account is None:
            raise UnauthorizedError("Account no longer exists")
        return identity_for(account)
