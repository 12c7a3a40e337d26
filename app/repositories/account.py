"""Account repository — lookups used by registration and login."""

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ConflictError
from app.domain.account import Account
from app.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    model = Account

    async def get_by_email(self, email: str) -> Account | None:
        result = await self._session.execute(
            self._base_query().where(Account.email == email)
        )
        return result.scalars().first()

    async def find_conflicting_fields(
        self,
        *,
        email: str,
        mobile_number: str,
        pan_number: str | None = None,
        gstin: str | None = None,
    ) -> list[str]:
        """Return the names of unique fields already taken by another account."""
        clauses = [Account.email == email, Account.mobile_number == mobile_number]
        if pan_number:
            clauses.append(Account.pan_number == pan_number)
        if gstin:
            clauses.append(Account.gstin == gstin)

        result = await self._session.execute(
            select(Account.email, Account.mobile_number, Account.pan_number, Account.gstin)
            .where(or_(*clauses))
        )
        taken: list[str] = []
        for row in result.all():
            if row.email == email and "email" not in taken:
                taken.append("email")
            if row.mobile_number == mobile_number and "mobile number" not in taken:
                taken.append("mobile number")
            if pan_number and row.pan_number == pan_number and "PAN" not in taken:
                taken.append("PAN")
            if gstin and row.gstin == gstin and "GSTIN" not in taken:
                taken.append("GSTIN")
        return taken

    async def create_account(self, **kwargs) -> Account:
        """Insert an account; a unique-constraint race surfaces as ConflictError."""
        try:
            return await self.create(**kwargs)
        except IntegrityError as exc:
            raise ConflictError(
                "Email, mobile number, PAN, or GSTIN already registered"
            ) from exc
