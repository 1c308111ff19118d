"""Persistence interface for users and packages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from ..dbmodels import Packages, Users


class UserAlreadyExistsError(Exception):
    """Raised when a username is already taken."""

    pass


@dataclass
class PackageQuery:
    """Storage-level description of a package listing.

    ``expires_on`` is an exact match; ``expires_before``/``expires_after`` are
    strict bounds. ``with_owner`` asks the store to load the owning user.
    """

    owner_id: UUID | None = None
    expires_on: datetime | None = None
    expires_before: datetime | None = None
    expires_after: datetime | None = None
    with_owner: bool = False


class CatalogStore(Protocol):
    """Data access used by the resolvers.

    Implementations must treat ``update_package``/``delete_package`` as
    conditional on ``(package_id, owner_id)`` and return ``None`` when no
    such row exists at write time.
    """

    async def get_user(self, user_id: UUID) -> Users | None: ...

    async def get_user_by_name(self, user_name: str) -> Users | None: ...

    async def create_user(self, *, user_name: str, password_hash: str, user_type: str) -> Users:
        """
        Persist a new user.

        Raises:
            UserAlreadyExistsError: If the username is taken
        """
        ...

    async def get_package(self, package_id: UUID) -> Packages | None: ...

    async def list_packages(self, query: PackageQuery) -> list[Packages]: ...

    async def create_package(
        self,
        *,
        owner_id: UUID,
        name: str,
        description: str,
        price: float,
        expiration_date: datetime,
    ) -> Packages: ...

    async def update_package(
        self, package_id: UUID, owner_id: UUID, changes: dict[str, Any]
    ) -> Packages | None: ...

    async def delete_package(self, package_id: UUID, owner_id: UUID) -> Packages | None: ...
