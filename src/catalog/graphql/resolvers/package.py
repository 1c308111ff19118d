from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ...logging import get_logger
from ...validation import PackageFields, PackagePatch, format_validation_error
from ..access_control import (
    can_create,
    can_mutate,
    denial_message,
    get_auth_context_from_info,
    get_store_from_info,
    scope_for_list,
)
from ..types.package import Package
from ..types.responses import (
    AUTHENTICATION_REQUIRED,
    PACKAGE_NOT_FOUND,
    ErrorCode,
    PackageListResponse,
    PackageResponse,
    failure,
)

if TYPE_CHECKING:
    from ..mutations.root import CreatePackageInput, UpdatePackageInput
    from ..types.package import PackageFilterInput

logger = get_logger(__name__)


# Query resolvers
async def resolve_all_packages(
    info: strawberry.Info, package_filter: PackageFilterInput | None = None
) -> PackageListResponse:
    """
    List packages visible to the caller.

    Admins see every package with its owner; other users only their own.
    """
    auth_context = get_auth_context_from_info(info)
    if not auth_context.is_authenticated:
        logger.info("Unauthenticated access to getAllPackages")
        return failure(
            PackageListResponse, ErrorCode.AUTHENTICATION_REQUIRED, AUTHENTICATION_REQUIRED
        )

    query = scope_for_list(auth_context, package_filter)
    packages = await get_store_from_info(info).list_packages(query)

    return PackageListResponse(
        status=True,
        message="Packages retrieved successfully",
        data=[Package.from_model(p, with_owner=query.with_owner) for p in packages],
    )


async def resolve_package_by_id(info: strawberry.Info, id: UUID) -> PackageResponse:
    """
    Resolve a package by its ID.

    Open to any caller, ownership is not checked.
    """
    package = await get_store_from_info(info).get_package(id)
    if package is None:
        return failure(PackageResponse, ErrorCode.NOT_FOUND, PACKAGE_NOT_FOUND)

    return PackageResponse(
        status=True,
        message="Package retrieved successfully",
        data=Package.from_model(package),
    )


# Mutation resolvers
async def create_package(info: strawberry.Info, request: CreatePackageInput) -> PackageResponse:
    """
    Create a new package.

    The authenticated caller always becomes the owner.
    """
    auth_context = get_auth_context_from_info(info)
    if not can_create(auth_context):
        return failure(PackageResponse, ErrorCode.AUTHENTICATION_REQUIRED, AUTHENTICATION_REQUIRED)

    try:
        fields = PackageFields(
            name=request.name,
            description=request.description,
            price=request.price,
            expiration_date=request.expiration_date,
        )
    except ValidationError as e:
        return failure(PackageResponse, ErrorCode.VALIDATION_ERROR, format_validation_error(e))

    try:
        package = await get_store_from_info(info).create_package(
            owner_id=auth_context.user_id, **fields.model_dump()
        )
    except SQLAlchemyError as e:
        logger.error("Error creating package", user_id=str(auth_context.user_id), error=str(e))
        return failure(PackageResponse, ErrorCode.INTERNAL_ERROR, "Failed to create package")

    logger.info("Package created", package_id=str(package.id), user_id=str(auth_context.user_id))

    return PackageResponse(
        status=True,
        message="Package created successfully",
        data=Package.from_model(package),
    )


async def update_package(
    info: strawberry.Info, id: UUID, request: UpdatePackageInput
) -> PackageResponse:
    """
    Update name, description or price of a package.

    Only the owner may update; admins included.
    """
    auth_context = get_auth_context_from_info(info)
    if not auth_context.is_authenticated:
        return failure(PackageResponse, ErrorCode.AUTHENTICATION_REQUIRED, AUTHENTICATION_REQUIRED)

    store = get_store_from_info(info)
    existing = await store.get_package(id)
    if existing is None:
        return failure(PackageResponse, ErrorCode.NOT_FOUND, PACKAGE_NOT_FOUND)

    if not can_mutate(auth_context, existing):
        logger.info(
            "Package update denied",
            package_id=str(id),
            user_id=str(auth_context.user_id),
        )
        return failure(PackageResponse, ErrorCode.FORBIDDEN, denial_message("update"))

    try:
        patch = PackagePatch(
            name=request.name,
            description=request.description,
            price=request.price,
        )
    except ValidationError as e:
        return failure(PackageResponse, ErrorCode.VALIDATION_ERROR, format_validation_error(e))

    changes = patch.changes()
    try:
        package = await store.update_package(id, auth_context.user_id, changes)
    except SQLAlchemyError as e:
        logger.error("Error updating package", package_id=str(id), error=str(e))
        return failure(PackageResponse, ErrorCode.INTERNAL_ERROR, "Failed to update package")

    if package is None:
        # Deleted between the ownership check and the write
        return failure(PackageResponse, ErrorCode.NOT_FOUND, PACKAGE_NOT_FOUND)

    logger.info(
        "Package updated",
        package_id=str(id),
        user_id=str(auth_context.user_id),
        updated_fields=sorted(changes),
    )

    return PackageResponse(
        status=True,
        message="Package updated successfully",
        data=Package.from_model(package),
    )


async def delete_package(info: strawberry.Info, id: UUID) -> PackageResponse:
    """
    Delete a package and return its last known state.

    Only the owner may delete; admins included.
    """
    auth_context = get_auth_context_from_info(info)
    if not auth_context.is_authenticated:
        return failure(PackageResponse, ErrorCode.AUTHENTICATION_REQUIRED, AUTHENTICATION_REQUIRED)

    store = get_store_from_info(info)
    existing = await store.get_package(id)
    if existing is None:
        return failure(PackageResponse, ErrorCode.NOT_FOUND, PACKAGE_NOT_FOUND)

    if not can_mutate(auth_context, existing):
        logger.info(
            "Package delete denied",
            package_id=str(id),
            user_id=str(auth_context.user_id),
        )
        return failure(PackageResponse, ErrorCode.FORBIDDEN, denial_message("delete"))

    try:
        package = await store.delete_package(id, auth_context.user_id)
    except SQLAlchemyError as e:
        logger.error("Error deleting package", package_id=str(id), error=str(e))
        return failure(PackageResponse, ErrorCode.INTERNAL_ERROR, "Failed to delete package")

    if package is None:
        return failure(PackageResponse, ErrorCode.NOT_FOUND, PACKAGE_NOT_FOUND)

    logger.info("Package deleted", package_id=str(id), user_id=str(auth_context.user_id))

    return PackageResponse(
        status=True,
        message="Package deleted successfully",
        data=Package.from_model(package),
    )
