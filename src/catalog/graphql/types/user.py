"""
User GraphQL type definitions
"""

from uuid import UUID

import strawberry

from ...dbmodels import Users


@strawberry.type
class PackageOwner:
    """Public view of a user. Never carries the password hash."""

    id: UUID
    user_name: str
    user_type: str

    @classmethod
    def from_model(cls, user: Users) -> "PackageOwner":
        return cls(id=user.id, user_name=user.user_name, user_type=user.user_type)


@strawberry.type
class Token:
    """Login credential."""

    token: str
