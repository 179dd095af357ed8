"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

# Keep test output readable and never point at a real database by accident
os.environ.setdefault("GRAPHQL_APP_DEBUG", "false")
os.environ.setdefault("GRAPHQL_APP_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from graphql_app.database.connection import make_session_factory  # noqa: E402
from graphql_app.dbmodels import Base, Countries, Users  # noqa: E402

GraphQLRequest = Callable[..., Awaitable[tuple[dict[str, Any], int]]]


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the schema created; one connection shared by all sessions."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with make_session_factory(db_engine)() as session:
        yield session


@pytest.fixture
def sql_statements(db_engine: AsyncEngine) -> Generator[list[str], None, None]:
    """Record every SQL statement sent to the test database."""
    statements: list[str] = []

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        _ = conn, cursor, parameters, context, executemany
        statements.append(statement)

    event.listen(db_engine.sync_engine, "before_cursor_execute", before_cursor_execute)
    yield statements
    event.remove(db_engine.sync_engine, "before_cursor_execute", before_cursor_execute)


@pytest.fixture
def country_factory(db_session: AsyncSession) -> Callable[..., Awaitable[Countries]]:
    async def create(name: str = "Copenhagen") -> Countries:
        country = Countries(name=name)
        db_session.add(country)
        await db_session.commit()
        return country

    return create


@pytest.fixture
def user_factory(
    db_session: AsyncSession, country_factory: Callable[..., Awaitable[Countries]]
) -> Callable[..., Awaitable[Users]]:
    async def create(name: str = "Bob", country: Countries | None = None) -> Users:
        if country is None:
            country = await country_factory()
        user = Users(name=name, country_id=country.id)
        db_session.add(user)
        await db_session.commit()
        return user

    return create


@pytest.fixture
def app(db_engine: AsyncEngine):
    from graphql_app.api.app import create_app

    return create_app(engine=db_engine)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_request(client: AsyncClient) -> GraphQLRequest:
    """POST a GraphQL query and return the decoded JSON body and status code."""

    async def request(
        query: str, variables: dict[str, Any] | None = None
    ) -> tuple[dict[str, Any], int]:
        response = await client.post(
            "/graphql",
            json={"query": query, "variables": variables or {}},
        )
        return response.json(), response.status_code

    return request


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "requires_db: mark test as requiring database connection")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
