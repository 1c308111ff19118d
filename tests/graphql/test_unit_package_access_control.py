"""
Unit tests for the package access policy
"""

import uuid
from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from catalog.auth.context import AuthContext
from catalog.dbmodels import Packages, Users
from catalog.graphql.access_control import (
    can_create,
    can_mutate,
    denial_message,
    scope_for_list,
    to_utc,
)
from catalog.graphql.types.package import PackageFilterInput


def make_user(user_type: str = "user") -> Users:
    return Users(id=uuid.uuid4(), user_name=f"user-{uuid.uuid4().hex[:6]}", user_type=user_type)


@pytest.fixture
def owner_context():
    return AuthContext(user=make_user())


@pytest.fixture
def other_context():
    return AuthContext(user=make_user())


@pytest.fixture
def admin_context():
    return AuthContext(user=make_user("admin"))


@pytest.fixture
def anonymous_context():
    return AuthContext(user=None)


@pytest.fixture
def sample_package(owner_context):
    package = MagicMock(spec=Packages)
    package.id = uuid.uuid4()
    package.user_id = owner_context.user_id
    return package


class TestCanCreate:
    def test_authenticated_user(self, owner_context):
        assert can_create(owner_context) is True

    def test_admin(self, admin_context):
        assert can_create(admin_context) is True

    def test_anonymous(self, anonymous_context):
        assert can_create(anonymous_context) is False

    def test_none_context(self):
        assert can_create(None) is False


class TestCanMutate:
    def test_owner(self, owner_context, sample_package):
        assert can_mutate(owner_context, sample_package) is True

    def test_other_user(self, other_context, sample_package):
        assert can_mutate(other_context, sample_package) is False

    def test_admin_has_no_override(self, admin_context, sample_package):
        """Admins can list everything but cannot change packages they do not own."""
        assert can_mutate(admin_context, sample_package) is False

    def test_admin_owner(self, admin_context, sample_package):
        sample_package.user_id = admin_context.user_id
        assert can_mutate(admin_context, sample_package) is True

    def test_anonymous(self, anonymous_context, sample_package):
        assert can_mutate(anonymous_context, sample_package) is False
        assert can_mutate(None, sample_package) is False


def test_denial_message():
    assert denial_message("update") == "You are not authorized to update this package"
    assert denial_message("delete") == "You are not authorized to delete this package"


class TestScopeForList:
    def test_standard_user_is_restricted_to_own_packages(self, owner_context):
        query = scope_for_list(owner_context)
        assert query.owner_id == owner_context.user_id
        assert query.with_owner is False

    def test_admin_sees_all_with_owner(self, admin_context):
        query = scope_for_list(admin_context)
        assert query.owner_id is None
        assert query.with_owner is True

    def test_anonymous_is_rejected(self, anonymous_context):
        with pytest.raises(ValueError):
            scope_for_list(anonymous_context)

    def test_exact_date(self, owner_context):
        exact = datetime(2024, 6, 1, tzinfo=UTC)
        query = scope_for_list(owner_context, PackageFilterInput(expiration_date=exact))
        assert query.expires_on == exact
        assert query.expires_before is None
        assert query.expires_after is None

    def test_range_bounds_combine(self, admin_context):
        before = datetime(2024, 12, 31, tzinfo=UTC)
        after = datetime(2024, 1, 1, tzinfo=UTC)
        query = scope_for_list(
            admin_context,
            PackageFilterInput(expiration_date_before=before, expiration_date_after=after),
        )
        assert query.expires_before == before
        assert query.expires_after == after
        assert query.owner_id is None

    def test_bound_replaces_exact_match(self, owner_context):
        """A later bound overwrites an exact match supplied in the same filter."""
        query = scope_for_list(
            owner_context,
            PackageFilterInput(
                expiration_date=datetime(2024, 6, 1, tzinfo=UTC),
                expiration_date_after=datetime(2024, 3, 1, tzinfo=UTC),
            ),
        )
        assert query.expires_on is None
        assert query.expires_after == datetime(2024, 3, 1, tzinfo=UTC)
        assert query.owner_id == owner_context.user_id

    def test_filter_does_not_lift_ownership(self, owner_context):
        query = scope_for_list(
            owner_context, PackageFilterInput(expiration_date_before=datetime(2030, 1, 1))
        )
        assert query.owner_id == owner_context.user_id


class TestToUtc:
    def test_naive_is_taken_as_utc(self):
        assert to_utc(datetime(2024, 1, 1, 12)) == datetime(2024, 1, 1, 12, tzinfo=UTC)

    def test_offset_is_converted(self):
        plus_two = timezone(timedelta(hours=2))
        converted = to_utc(datetime(2024, 1, 1, 12, tzinfo=plus_two))
        assert converted.tzinfo == UTC
        assert converted.hour == 10
