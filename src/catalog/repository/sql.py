"""SQLAlchemy implementation of the catalog store."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.connection import get_async_session
from ..dbmodels import Packages, Users
from ..logging import get_logger
from .base import PackageQuery, UserAlreadyExistsError

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class SqlAlchemyCatalogStore:
    """Catalog store backed by an async SQLAlchemy session factory.

    Every call runs in its own session, so one store instance can be shared
    across concurrent requests.
    """

    def __init__(self, session_factory: SessionFactory = get_async_session):
        self._session_factory = session_factory

    async def get_user(self, user_id: UUID) -> Users | None:
        async with self._session_factory() as session:
            return await session.get(Users, user_id)

    async def get_user_by_name(self, user_name: str) -> Users | None:
        async with self._session_factory() as session:
            result = await session.execute(select(Users).where(Users.user_name == user_name))
            return result.scalar_one_or_none()

    async def create_user(self, *, user_name: str, password_hash: str, user_type: str) -> Users:
        async with self._session_factory() as session:
            user = Users(user_name=user_name, password_hash=password_hash, user_type=user_type)
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise UserAlreadyExistsError(user_name) from e
            await session.refresh(user)
            return user

    async def get_package(self, package_id: UUID) -> Packages | None:
        async with self._session_factory() as session:
            return await session.get(Packages, package_id)

    async def list_packages(self, query: PackageQuery) -> list[Packages]:
        stmt = select(Packages)

        if query.owner_id is not None:
            stmt = stmt.where(Packages.user_id == query.owner_id)
        if query.expires_on is not None:
            stmt = stmt.where(Packages.expiration_date == query.expires_on)
        if query.expires_before is not None:
            stmt = stmt.where(Packages.expiration_date < query.expires_before)
        if query.expires_after is not None:
            stmt = stmt.where(Packages.expiration_date > query.expires_after)
        if query.with_owner:
            stmt = stmt.options(selectinload(Packages.owner))

        stmt = stmt.order_by(Packages.created_at.asc(), Packages.id.asc())

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def create_package(
        self,
        *,
        owner_id: UUID,
        name: str,
        description: str,
        price: float,
        expiration_date: datetime,
    ) -> Packages:
        async with self._session_factory() as session:
            package = Packages(
                user_id=owner_id,
                name=name,
                description=description,
                price=price,
                expiration_date=expiration_date,
            )
            session.add(package)
            await session.commit()
            await session.refresh(package)
            return package

    async def _locked_owned_package(
        self, session: AsyncSession, package_id: UUID, owner_id: UUID
    ) -> Packages | None:
        # Row lock keeps the ownership check and the write in one transaction
        stmt = (
            select(Packages)
            .where(Packages.id == package_id, Packages.user_id == owner_id)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_package(
        self, package_id: UUID, owner_id: UUID, changes: dict[str, Any]
    ) -> Packages | None:
        async with self._session_factory() as session:
            package = await self._locked_owned_package(session, package_id, owner_id)
            if package is None:
                return None

            for field, value in changes.items():
                setattr(package, field, value)

            await session.commit()
            await session.refresh(package)
            return package

    async def delete_package(self, package_id: UUID, owner_id: UUID) -> Packages | None:
        async with self._session_factory() as session:
            package = await self._locked_owned_package(session, package_id, owner_id)
            if package is None:
                return None

            await session.delete(package)
            await session.commit()
            logger.debug("Package row deleted", package_id=str(package_id))
            return package
