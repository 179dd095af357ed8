"""
Errors raised by resolvers and surfaced as GraphQL field errors
"""


class GraphQLAppError(Exception):
    """Base class for errors reported to GraphQL clients."""


class InvalidCursorError(GraphQLAppError):
    """The `after` cursor is not a page number."""

    def __init__(self, cursor: str):
        self.cursor = cursor
        super().__init__(f"Invalid cursor: {cursor!r}")


class InvalidPageSizeError(GraphQLAppError):
    def __init__(self, page_size: int):
        self.page_size = page_size
        super().__init__(f"`first` must be a positive integer, got {page_size}")


class NotFoundError(GraphQLAppError):
    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} not found")


class RelationNotLoadedError(GraphQLAppError):
    """A resolver read a relation the eager loader did not populate."""

    def __init__(self, relation: str):
        self.relation = relation
        super().__init__(f"Internal error: relation '{relation}' was not loaded")
