"""SQLAlchemy ORM model for registered accounts (vendors and officials)."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.domain.enums import Role
from app.domain.mixins import TimestampMixin


class Account(Base, TimestampMixin):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Public identifier shown to officials, e.g. "VEN-3F9A0C21D7"
    unique_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True, index=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    mobile_number: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    legal_structure: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    pan_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, unique=True)
    gstin: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, unique=True)

    is_official: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Optional sub-role for officials: "HOD" | "Director" | ...
    official_title: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    applications: Mapped[List["Application"]] = relationship(
        back_populates="account", lazy="noload"
    )

    @property
    def role(self) -> Role:
        return Role.OFFICIAL if self.is_official else Role.VENDOR
