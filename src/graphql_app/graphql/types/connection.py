"""
Connection types for cursor-based pagination of users
"""

import strawberry

from ..scalars import Cursor
from .user import User


@strawberry.type
class PageInfo:
    start_cursor: Cursor | None
    end_cursor: Cursor | None
    has_next_page: bool


@strawberry.type
class UserEdge:
    node: User
    # Cursor of the page after the one this edge is on
    cursor: Cursor


@strawberry.type
class UserConnection:
    """A page of users plus the information needed to fetch the next one."""

    edges: list[UserEdge]
    page_info: PageInfo
    total_count: int
