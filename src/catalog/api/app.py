"""
Main FastAPI application for the package catalog
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..auth.adapters.base import AuthAdapter
from ..auth.factory import get_auth_adapter
from ..config import settings
from ..database import init_database
from ..database.connection import test_database_connection
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..repository import CatalogStore, SqlAlchemyCatalogStore

# Configure logging before creating logger
configure_logging(debug=settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting package catalog API...")

    if app.state.owns_database:
        init_database()
        ok, error = await test_database_connection()
        if ok:
            logger.info("Database connection verified")
        else:
            logger.error("Database is not reachable", error=error)
            if settings.environment.lower() in ("production", "prod"):
                raise RuntimeError(error)

    yield

    logger.info("Shutting down package catalog API...")


def create_app(
    store: CatalogStore | None = None,
    auth_adapter: AuthAdapter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``store`` and ``auth_adapter`` default to the SQLAlchemy store on the
    shared pool and the JWT adapter built from settings.
    """
    from ..graphql.schema import create_graphql_router, validate_schema

    app = FastAPI(
        title="Package Catalog API",
        description="GraphQL package catalog with per-owner access control",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.owns_database = store is None

    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    logger.info("Validating GraphQL schema...")
    validate_schema()

    graphql_router = create_graphql_router(
        store=store or SqlAlchemyCatalogStore(),
        auth_adapter=auth_adapter or get_auth_adapter(),
        graphiql=settings.debug,
    )
    app.include_router(graphql_router, prefix="")
    logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "catalog.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
