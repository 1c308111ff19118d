"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Generator
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import pytest

from catalog.auth.adapters.jwt import JWTAuthAdapter
from catalog.auth.context import AuthContext
from catalog.config import settings
from catalog.dbmodels import Packages, Users
from catalog.graphql.schema import schema
from catalog.repository.base import PackageQuery, UserAlreadyExistsError

TEST_SECRET = "test-secret-key-for-testing-only"


class InMemoryCatalogStore:
    """Dict-backed CatalogStore used in place of the database."""

    def __init__(self) -> None:
        self.users: dict[UUID, Users] = {}
        self.packages: dict[UUID, Packages] = {}

    async def get_user(self, user_id: UUID) -> Users | None:
        return self.users.get(user_id)

    async def get_user_by_name(self, user_name: str) -> Users | None:
        return next((u for u in self.users.values() if u.user_name == user_name), None)

    async def create_user(self, *, user_name: str, password_hash: str, user_type: str) -> Users:
        if await self.get_user_by_name(user_name) is not None:
            raise UserAlreadyExistsError(user_name)
        now = datetime.now(UTC)
        user = Users(
            id=uuid4(),
            user_name=user_name,
            password_hash=password_hash,
            user_type=user_type,
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user
        return user

    async def get_package(self, package_id: UUID) -> Packages | None:
        return self.packages.get(package_id)

    async def list_packages(self, query: PackageQuery) -> list[Packages]:
        results = []
        for package in self.packages.values():
            expires = package.expiration_date
            if query.owner_id is not None and package.user_id != query.owner_id:
                continue
            if query.expires_on is not None and expires != query.expires_on:
                continue
            if query.expires_before is not None and not expires < query.expires_before:
                continue
            if query.expires_after is not None and not expires > query.expires_after:
                continue
            results.append(package)
        return results

    async def create_package(
        self,
        *,
        owner_id: UUID,
        name: str,
        description: str,
        price: float,
        expiration_date: datetime,
    ) -> Packages:
        now = datetime.now(UTC)
        package = Packages(
            id=uuid4(),
            user_id=owner_id,
            owner=self.users.get(owner_id),
            name=name,
            description=description,
            price=price,
            expiration_date=expiration_date,
            created_at=now,
            updated_at=now,
        )
        self.packages[package.id] = package
        return package

    async def update_package(
        self, package_id: UUID, owner_id: UUID, changes: dict[str, Any]
    ) -> Packages | None:
        package = self.packages.get(package_id)
        if package is None or package.user_id != owner_id:
            return None
        for field, value in changes.items():
            setattr(package, field, value)
        package.updated_at = datetime.now(UTC)
        return package

    async def delete_package(self, package_id: UUID, owner_id: UUID) -> Packages | None:
        package = self.packages.get(package_id)
        if package is None or package.user_id != owner_id:
            return None
        return self.packages.pop(package_id)


@pytest.fixture
def store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def jwt_adapter() -> JWTAuthAdapter:
    return JWTAuthAdapter(secret_key=TEST_SECRET)


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use the cheapest bcrypt cost so registration tests stay quick."""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest.fixture
def add_user(store: InMemoryCatalogStore):
    """Insert a user directly into the store."""

    async def _add_user(user_name: str, user_type: str = "user") -> Users:
        return await store.create_user(
            user_name=user_name, password_hash="not-a-real-hash", user_type=user_type
        )

    return _add_user


@pytest.fixture
def add_package(store: InMemoryCatalogStore):
    """Insert a package owned by ``owner`` directly into the store."""

    async def _add_package(
        owner: Users,
        name: str = "Starter",
        expiration_date: datetime | None = None,
        price: float = 10.0,
    ) -> Packages:
        return await store.create_package(
            owner_id=owner.id,
            name=name,
            description=f"{name} package",
            price=price,
            expiration_date=expiration_date or datetime(2030, 1, 1, tzinfo=UTC),
        )

    return _add_package


@pytest.fixture
def execute(store: InMemoryCatalogStore, jwt_adapter: JWTAuthAdapter):
    """Run a GraphQL document as ``user`` (anonymous when None)."""

    async def _execute(
        document: str, variables: dict[str, Any] | None = None, user: Users | None = None
    ):
        context = {
            "request": None,
            "auth": AuthContext(user=user),
            "store": store,
            "auth_adapter": jwt_adapter,
        }
        return await schema.execute(document, variable_values=variables, context_value=context)

    return _execute


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
