"""SQLAlchemy ORM models for empanelment applications and their documents."""

from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.domain.enums import ApplicationStatus
from app.domain.mixins import CreatedAtMixin, TimestampMixin


class Application(Base, TimestampMixin):
    """One department-specific submission. Never deleted in normal operation."""

    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    department: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    # Validated department variant, serialized as a self-describing JSON document
    form_data: Mapped[Any] = mapped_column(JSON, nullable=False)

    status: Mapped[str] = mapped_column(
        String(50),
        default=ApplicationStatus.PENDING_VERIFICATION.value,
        nullable=False,
        index=True,
    )
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    account: Mapped["Account"] = relationship(back_populates="applications", lazy="noload")
    documents: Mapped[List["Document"]] = relationship(
        back_populates="application",
        lazy="noload",
        order_by="Document.id",
    )


class Document(Base, CreatedAtMixin):
    """Metadata for one uploaded file. Immutable once written."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)
    mime_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    size_bytes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    application: Mapped["Application"] = relationship(back_populates="documents")
