"""
Package GraphQL type definitions
"""

from datetime import datetime
from uuid import UUID

import strawberry

from ...dbmodels import Packages
from .user import PackageOwner


@strawberry.type
class Package:
    """Package type for GraphQL API."""

    id: UUID
    name: str
    description: str
    price: float
    expiration_date: datetime
    owner_id: UUID
    created_at: datetime
    updated_at: datetime
    owner: PackageOwner | None = strawberry.field(
        default=None, description="Owning user, resolved on admin listings only."
    )

    @classmethod
    def from_model(cls, package: Packages, with_owner: bool = False) -> "Package":
        return cls(
            id=package.id,
            name=package.name,
            description=package.description,
            price=package.price,
            expiration_date=package.expiration_date,
            owner_id=package.user_id,
            created_at=package.created_at,
            updated_at=package.updated_at,
            owner=PackageOwner.from_model(package.owner) if with_owner else None,
        )


@strawberry.input
class PackageFilterInput:
    """Expiration-date filter for package listings."""

    expiration_date: datetime | None = None
    expiration_date_before: datetime | None = None
    expiration_date_after: datetime | None = None
