"""
Main FastAPI application for the GraphQL App backend
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from .. import __version__
from ..config import settings
from ..database.connection import (
    dispose_database,
    get_session_factory,
    init_database,
    make_session_factory,
    test_database_connection,
)
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

# Configure logging before creating logger
configure_logging(debug=settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting GraphQL App API...")
    owns_pool = app.state.db_engine is None
    if owns_pool:
        app.state.db_engine = init_database()
        app.state.session_factory = get_session_factory()

    success, error_message = await test_database_connection(app.state.db_engine)
    if success:
        logger.info("Database connection validation successful")
    else:
        logger.error(
            "Database connection validation failed - requests will get 503 until it recovers",
            error=error_message,
        )

    yield

    logger.info("Shutting down GraphQL App API...")
    if owns_pool:
        await dispose_database()
        app.state.db_engine = None
        app.state.session_factory = None


def create_app(engine: AsyncEngine | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        engine: Engine whose pool serves the requests. When omitted the
            shared pool is created on startup from the configured URL.
    """
    app = FastAPI(
        title="GraphQL App API",
        description="Users and countries over GraphQL",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.db_engine = engine
    app.state.session_factory = make_session_factory(engine) if engine is not None else None

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

    @app.get("/graphiql", include_in_schema=False)
    async def graphiql():  # pyright: ignore [reportUnusedFunction]
        """Send browsers to the GraphiQL IDE served by the GraphQL endpoint."""
        return RedirectResponse(url="/graphql")

    try:
        from ..graphql.schema import create_graphql_router, validate_schema

        logger.info("Validating GraphQL schema...")
        validate_schema()

        app.include_router(create_graphql_router(), prefix="")
        logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")
    except Exception as e:  # pragma: no cover
        logger.error("Failed to initialize GraphQL endpoint", error=str(e))
        raise

    return app


# Create the main application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "graphql_app.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
