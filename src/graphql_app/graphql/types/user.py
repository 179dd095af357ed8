"""
User GraphQL type definitions
"""

import dataclasses

import strawberry

from ..eager_loading import LoadedRelations
from .country import Country


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: strawberry.ID
    name: str

    country_id: strawberry.Private[int]
    relations: strawberry.Private[LoadedRelations] = dataclasses.field(
        default_factory=LoadedRelations
    )

    @strawberry.field
    async def country(self, info: strawberry.Info) -> Country:
        """Get the country this user belongs to."""
        from ..resolvers.user import resolve_user_country

        return await resolve_user_country(self, info)
