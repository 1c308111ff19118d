"""
Root GraphQL query definitions
"""

from uuid import UUID

import strawberry

from ..types.package import PackageFilterInput
from ..types.responses import PackageListResponse, PackageResponse


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field(name="getAllPackages")
    async def get_all_packages(
        self, info: strawberry.Info, filter: PackageFilterInput | None = None
    ) -> PackageListResponse:
        """Get the packages visible to the current user."""
        from ..resolvers.package import resolve_all_packages

        return await resolve_all_packages(info, filter)

    @strawberry.field(name="getSinglePackage")
    async def get_single_package(self, info: strawberry.Info, id: UUID) -> PackageResponse:
        """Get a package by ID."""
        from ..resolvers.package import resolve_package_by_id

        return await resolve_package_by_id(info, id)
