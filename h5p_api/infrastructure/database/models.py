# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the content bank tables.

Tables:
    scopes: System scope and collection scopes, linked by parent_id.
    content_items: Content bank entries.
    content_files: Binary attached to a content item (at most one).
    content_type_settings: Per-scope content kind switches.
    capability_grants: Capabilities granted to principals on scopes.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for all content bank models."""

    pass


class TimestampMixin:
    """Adds created_at and updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class ScopeRecord(Base):
    """Authorization and storage scope."""

    __tablename__ = "scopes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(20), nullable=False, default="collection")
    collection_id: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, unique=True, index=True
    )
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("scopes.id"), nullable=True
    )


class ContentItemRecord(TimestampMixin, Base):
    """Content bank entry."""

    __tablename__ = "content_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    scope_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("scopes.id"), nullable=False, index=True
    )
    content_kind: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    owner_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    file: Mapped[Optional["ContentFileRecord"]] = relationship(
        back_populates="item",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class ContentFileRecord(TimestampMixin, Base):
    """Binary attached to a content item."""

    __tablename__ = "content_files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("content_items.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    item: Mapped[ContentItemRecord] = relationship(back_populates="file")


class ContentTypeSettingRecord(Base):
    """Enables or disables a content kind for a scope and its descendants."""

    __tablename__ = "content_type_settings"
    __table_args__ = (UniqueConstraint("scope_id", "content_kind"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    scope_id: Mapped[int] = mapped_column(Integer, ForeignKey("scopes.id"), nullable=False)
    content_kind: Mapped[str] = mapped_column(String(50), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class CapabilityGrantRecord(Base):
    """Capability held by a principal on a scope and its descendants."""

    __tablename__ = "capability_grants"
    __table_args__ = (UniqueConstraint("principal_id", "capability", "scope_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    principal_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    capability: Mapped[str] = mapped_column(String(100), nullable=False)
    scope_id: Mapped[int] = mapped_column(Integer, ForeignKey("scopes.id"), nullable=False)
