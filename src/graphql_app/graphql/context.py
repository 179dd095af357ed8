"""
Per-request GraphQL context
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import strawberry
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from ..config import settings
from ..database.connection import get_request_session


class Context(BaseContext):
    """Holds the database session checked out for the current request."""

    def __init__(self, session: AsyncSession, eager_loading: bool = True):
        super().__init__()
        self.session = session
        self.eager_loading = eager_loading
        # Sibling resolvers run concurrently but share one connection
        self._session_lock = asyncio.Lock()

    @asynccontextmanager
    async def database(self) -> AsyncIterator[AsyncSession]:
        """Use the request's session exclusively for the duration of the block."""
        async with self._session_lock:
            yield self.session


async def get_context(session: AsyncSession = Depends(get_request_session)) -> Context:
    """Get the context for GraphQL resolvers."""
    return Context(session=session, eager_loading=settings.eager_loading)


def get_context_from_info(info: strawberry.Info) -> Context:
    return info.context
