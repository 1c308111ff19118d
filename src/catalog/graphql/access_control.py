"""
Package access policy and GraphQL context helpers for resolvers
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import strawberry

from ..auth.context import ANONYMOUS, AuthContext
from ..logging import get_logger
from ..repository.base import PackageQuery

if TYPE_CHECKING:
    from ..auth.adapters.base import AuthAdapter
    from ..dbmodels import Packages
    from ..repository.base import CatalogStore
    from .types.package import PackageFilterInput

logger = get_logger(__name__)


def get_auth_context_from_info(info: strawberry.Info) -> AuthContext:
    """
    Return the identity built for this request by the context getter.

    Falls back to an anonymous context if none was attached.
    """
    auth_context = info.context.get("auth")
    if auth_context is None:
        logger.error("Auth context not found in GraphQL context")
        return ANONYMOUS
    return auth_context


def get_store_from_info(info: strawberry.Info) -> CatalogStore:
    return info.context["store"]


def get_auth_adapter_from_info(info: strawberry.Info) -> AuthAdapter:
    return info.context["auth_adapter"]


def to_utc(value: datetime) -> datetime:
    """Normalize a timestamp to UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def can_create(auth_context: AuthContext | None) -> bool:
    """Any authenticated caller may create packages, whatever their role."""
    return auth_context is not None and auth_context.is_authenticated


def can_mutate(auth_context: AuthContext | None, package: Packages) -> bool:
    """
    Check if the caller may update or delete a package.

    Only the owner may. Admins get no override here, unlike listing.
    """
    if not auth_context or not auth_context.is_authenticated:
        return False
    return package.user_id == auth_context.user_id


def denial_message(action: str) -> str:
    return f"You are not authorized to {action} this package"


def scope_for_list(
    auth_context: AuthContext, package_filter: PackageFilterInput | None = None
) -> PackageQuery:
    """
    Build the listing query for an authenticated caller.

    Admins see every package (with owners loaded); everyone else only their
    own. Filter fields are applied in order, and a before/after bound
    replaces any exact expiration match set earlier:

    1. ``expiration_date`` sets an exact match
    2. ``expiration_date_before`` sets a strict upper bound
    3. ``expiration_date_after`` sets a strict lower bound
    """
    if not auth_context.is_authenticated:
        raise ValueError("scope_for_list requires an authenticated caller")

    query = PackageQuery()
    if auth_context.is_admin:
        query.with_owner = True
    else:
        query.owner_id = auth_context.user_id

    if package_filter is None:
        return query

    if package_filter.expiration_date is not None:
        query.expires_on = to_utc(package_filter.expiration_date)
    if package_filter.expiration_date_before is not None:
        query.expires_on = None
        query.expires_before = to_utc(package_filter.expiration_date_before)
    if package_filter.expiration_date_after is not None:
        query.expires_on = None
        query.expires_after = to_utc(package_filter.expiration_date_after)

    return query
