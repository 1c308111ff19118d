"""
Database models for the package catalog (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKeyConstraint,
    Index,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

ADMIN_USER_TYPE = "admin"


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("user_name", name="users_user_name_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    user_type: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow, onupdate=utcnow)

    packages: Mapped[list["Packages"]] = relationship(
        "Packages", uselist=True, back_populates="owner"
    )

    @property
    def is_admin(self) -> bool:
        return self.user_type == ADMIN_USER_TYPE


class Packages(Base):
    __tablename__ = "packages"
    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        ForeignKeyConstraint(["user_id"], ["users.id"], name="packages_user_id_fkey"),
        PrimaryKeyConstraint("id", name="packages_pkey"),
        Index("idx_packages_user_id", "user_id"),
        Index("idx_packages_expiration_date", "expiration_date"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    expiration_date: Mapped[datetime] = mapped_column(DateTime(True), nullable=False)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow, onupdate=utcnow)

    owner: Mapped["Users"] = relationship("Users", back_populates="packages")


target_metadata = Base.metadata

__all__ = ["ADMIN_USER_TYPE", "Base", "Packages", "Users", "target_metadata", "utcnow"]
