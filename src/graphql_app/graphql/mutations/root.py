"""
Root GraphQL mutation definitions
"""

import strawberry


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation
    def noop(self) -> bool:
        """Do nothing. GraphQL requires the mutation type to have a field."""
        return True
