"""
Country GraphQL type definitions
"""

import dataclasses

import strawberry

from ..eager_loading import LoadedRelations


@strawberry.type
class Country:
    """Country type for GraphQL API."""

    id: strawberry.ID
    name: str

    relations: strawberry.Private[LoadedRelations] = dataclasses.field(
        default_factory=LoadedRelations
    )
