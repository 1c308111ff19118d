"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import GraphQLError
from graphql import validate_schema as gql_validate_schema
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter

from ..auth.adapters.base import AuthAdapter
from ..auth.middleware import CredentialVerifier, build_auth_context
from ..logging import get_logger
from ..repository.base import CatalogStore
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)


def should_mask_error(error: GraphQLError) -> bool:
    """Hide the text of unexpected exceptions raised inside resolvers.

    Query syntax and validation errors have no original exception and are
    returned as-is.
    """
    original = error.original_error
    return original is not None and not isinstance(original, GraphQLError)


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[MaskErrors(should_mask_error=should_mask_error)],
)


def validate_schema() -> None:
    """Validate the GraphQL schema at startup so type errors fail fast.

    Raises:
        Exception: If the schema is invalid or introspection fails
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        from graphql import get_introspection_query, graphql_sync

        result = graphql_sync(graphql_schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


async def build_context(
    request: Request | None,
    store: CatalogStore,
    auth_adapter: AuthAdapter,
) -> dict[str, Any]:
    """Resolve the caller once and collect what resolvers need."""
    authorization = request.headers.get("authorization") if request is not None else None
    verifier = CredentialVerifier(auth_adapter, store)
    return {
        "request": request,
        "auth": await build_auth_context(verifier, authorization),
        "store": store,
        "auth_adapter": auth_adapter,
    }


def create_graphql_router(
    store: CatalogStore, auth_adapter: AuthAdapter, graphiql: bool = True
) -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI."""

    async def get_context(request: Request) -> dict[str, Any]:
        return await build_context(request, store, auth_adapter)

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if graphiql else None,
        context_getter=get_context,
    )
