"""Create an official account (officials cannot self-register).

Usage:
    python -m scripts.seed_official <email> <mobile_number> [title] [password]
If password is omitted, a random one is printed.
"""

import asyncio
import secrets
import sys

from app.core.config import settings
from app.db.base import Database
from app.schemas.account import RegisterRequest
from app.services.account import AccountService


async def main() -> None:
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.seed_official <email> <mobile_number> [title] [password]",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    mobile = sys.argv[2]
    title = sys.argv[3] if len(sys.argv) > 3 else None
    password = sys.argv[4] if len(sys.argv) > 4 else secrets.token_urlsafe(12)

    database = Database(settings)
    try:
        async with database.session_factory() as session:
            async with session.begin():
                account = await AccountService(session).register(
                    RegisterRequest(
                        email=email,
                        mobile_number=mobile,
                        password=password,
                        company_name="Empanelment Office",
                    ),
                    is_official=True,
                    official_title=title,
                )
        print(f"Created official: {account.id} ({account.unique_id}) {email}")
        print(f"Password: {password}")
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
