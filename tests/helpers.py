"""Shared test helpers: account creation, row counts, stored-file listing."""

from pathlib import Path

from sqlalchemy import func, select

from app.core.security import Identity
from app.db.base import Database
from app.schemas.account import RegisterRequest
from app.services.account import AccountService, identity_for
from app.services.document_stage import RawFile

TEST_PASSWORD = "Sup3rSecret!pw"


async def make_account(
    database: Database,
    email: str,
    mobile: str,
    *,
    official: bool = False,
    company: str = "Acme Infra Pvt Ltd",
    title: str | None = None,
) -> Identity:
    """Register an account in its own committed session."""
    async with database.session_factory() as s:
        account = await AccountService(s).register(
            RegisterRequest(
                email=email,
                mobile_number=mobile,
                password=TEST_PASSWORD,
                company_name=company,
            ),
            is_official=official,
            official_title=title,
        )
        await s.commit()
        return identity_for(account)


async def count_rows(database: Database, model) -> int:
    async with database.session_factory() as s:
        return (await s.execute(select(func.count()).select_from(model))).scalar_one()


def stored_files(root: str | Path) -> list[Path]:
    return [p for p in Path(root).rglob("*") if p.is_file()]


def pdf(name: str = "certificate.pdf", body: bytes = b"%PDF-1.4 test document") -> RawFile:
    return RawFile(filename=name, content_type="application/pdf", data=body)
