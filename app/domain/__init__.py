"""Domain package — all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  account.py      — Registered vendors and officials
  application.py  — Applications and their uploaded documents
  enums.py        — Role, Department, ApplicationStatus
  mixins.py       — Shared CreatedAtMixin, TimestampMixin
"""

from app.domain.account import Account
from app.domain.application import Application, Document

__all__ = [
    "Account",
    "Application",
    "Document",
]
