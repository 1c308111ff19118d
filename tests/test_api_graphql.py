"""
End-to-end tests of the HTTP surface: health check and the GraphQL endpoint
with tokens carried in the Authorization header.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from catalog import __version__
from catalog.api.app import create_app

REGISTER = """
    mutation {
        createUser(request: {userName: "alice", password: "s3cret", userType: "user"}) {
            status
        }
    }
"""

LOGIN = """
    mutation {
        login(request: {userName: "alice", password: "s3cret"}) {
            status
            data { token }
        }
    }
"""

CREATE_PACKAGE = """
    mutation {
        createPackage(request: {
            name: "Basic",
            description: "Basic tier",
            price: 9.99,
            expirationDate: "2030-01-01T00:00:00+00:00"
        }) {
            status
            code
            data { id ownerId }
        }
    }
"""

LIST_PACKAGES = "query { getAllPackages { status code data { name } } }"


@pytest_asyncio.fixture
async def client(store, jwt_adapter):
    app = create_app(store=store, auth_adapter=jwt_adapter)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def graphql(client: AsyncClient, query: str, token: str | None = None) -> dict:
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    response = await client.post("/graphql", json={"query": query}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert "errors" not in body
    return body["data"]


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}


@pytest.mark.asyncio
async def test_register_login_and_create(client, store):
    assert (await graphql(client, REGISTER))["createUser"]["status"] is True

    login = (await graphql(client, LOGIN))["login"]
    assert login["status"] is True
    token = login["data"]["token"]

    created = (await graphql(client, CREATE_PACKAGE, token))["createPackage"]
    assert created["status"] is True
    alice = await store.get_user_by_name("alice")
    assert created["data"]["ownerId"] == str(alice.id)

    listing = (await graphql(client, LIST_PACKAGES, token))["getAllPackages"]
    assert listing["status"] is True
    assert listing["data"] == [{"name": "Basic"}]


@pytest.mark.asyncio
async def test_missing_token_is_anonymous(client):
    listing = (await graphql(client, LIST_PACKAGES))["getAllPackages"]

    assert listing["status"] is False
    assert listing["code"] == "AUTHENTICATION_REQUIRED"


@pytest.mark.asyncio
async def test_invalid_token_is_anonymous(client):
    created = (await graphql(client, CREATE_PACKAGE, "forged.token.value"))["createPackage"]

    assert created["status"] is False
    assert created["code"] == "AUTHENTICATION_REQUIRED"
    assert created["data"] is None


@pytest.mark.asyncio
async def test_syntax_errors_are_reported(client):
    response = await client.post("/graphql", json={"query": "query { getAllPackages { "})

    body = response.json()
    assert body["errors"]
