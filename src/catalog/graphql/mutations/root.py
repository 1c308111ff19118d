"""
Root GraphQL mutation definitions
"""

from datetime import datetime
from uuid import UUID

import strawberry

from ..types.responses import CreateUserResponse, LoginResponse, PackageResponse


# Input types for mutations
@strawberry.input
class CreatePackageInput:
    """Input for creating a new package. The owner is always the caller."""

    name: str
    description: str
    price: float
    expiration_date: datetime


@strawberry.input
class UpdatePackageInput:
    """Input for updating a package. Omitted or null fields are left unchanged."""

    name: str | None = None
    description: str | None = None
    price: float | None = None


@strawberry.input
class CreateUserInput:
    user_name: str
    password: str
    user_type: str


@strawberry.input
class LoginInput:
    user_name: str
    password: str


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Package mutations
    @strawberry.mutation(name="createPackage")
    async def create_package(
        self, info: strawberry.Info, request: CreatePackageInput
    ) -> PackageResponse:
        """Create a package owned by the caller."""
        from ..resolvers.package import create_package

        return await create_package(info, request)

    @strawberry.mutation(name="updatePackage")
    async def update_package(
        self, info: strawberry.Info, id: UUID, request: UpdatePackageInput
    ) -> PackageResponse:
        """Update a package the caller owns."""
        from ..resolvers.package import update_package

        return await update_package(info, id, request)

    @strawberry.mutation(name="deletePackage")
    async def delete_package(self, info: strawberry.Info, id: UUID) -> PackageResponse:
        """Delete a package the caller owns."""
        from ..resolvers.package import delete_package

        return await delete_package(info, id)

    # User mutations
    @strawberry.mutation(name="createUser")
    async def create_user(
        self, info: strawberry.Info, request: CreateUserInput
    ) -> CreateUserResponse:
        """Register a new user."""
        from ..resolvers.user import create_user

        return await create_user(info, request)

    @strawberry.mutation
    async def login(self, info: strawberry.Info, request: LoginInput) -> LoginResponse:
        """Log in and receive a token valid for one day."""
        from ..resolvers.user import login

        return await login(info, request)
