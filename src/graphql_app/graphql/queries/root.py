"""
Root GraphQL query definitions
"""

import strawberry

from ..scalars import Cursor
from ..types.connection import UserConnection
from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def users(self, info: strawberry.Info) -> list[User]:
        """Get all users."""
        from ..resolvers.user import resolve_users

        return await resolve_users(info)

    @strawberry.field
    async def user_connections(
        self, info: strawberry.Info, first: int, after: Cursor | None = None
    ) -> UserConnection:
        """Get a page of users; pass `pageInfo.endCursor` as `after` for the next page."""
        from ..resolvers.connection import resolve_user_connections

        return await resolve_user_connections(info, after, first)
