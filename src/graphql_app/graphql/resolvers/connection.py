from __future__ import annotations

import strawberry
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...dbmodels import Users
from ...logging import get_logger
from ..context import get_context_from_info
from ..nodes import user_nodes
from ..pagination import paginate, parse_cursor, validate_page_size
from ..trail import QueryTrail
from ..types.connection import PageInfo, UserConnection, UserEdge

logger = get_logger(__name__)


async def resolve_user_connections(
    info: strawberry.Info, after: str | None, first: int
) -> UserConnection:
    ctx = get_context_from_info(info)
    async with ctx.database() as session:
        return await user_connections(
            session,
            after,
            first,
            QueryTrail.from_info(info),
            eager_loading=ctx.eager_loading,
        )


async def user_connections(
    session: AsyncSession,
    cursor: str | None,
    page_size: int,
    trail: QueryTrail,
    eager_loading: bool = True,
) -> UserConnection:
    """
    Load one page of users ordered by ID.

    Every edge carries the cursor of the *next* page, so ``endCursor`` can be
    passed straight back as ``after``. Nested relations under
    ``edges.node`` are loaded for the whole page at once.
    """
    page_number = parse_cursor(cursor)
    per_page = validate_page_size(page_size)

    base_query = select(Users).order_by(Users.id)
    page = await paginate(session, base_query, page_number, per_page)

    node_trail = trail.walk("edges", "node")
    if eager_loading and node_trail is not None:
        users = await user_nodes.load(page.items, session, node_trail)
    else:
        users = user_nodes.from_db_models(page.items)

    next_page_cursor = page.next_page_cursor
    edges = [UserEdge(node=user, cursor=next_page_cursor) for user in users]

    page_info = PageInfo(
        start_cursor=edges[0].cursor if edges else None,
        end_cursor=edges[-1].cursor if edges else None,
        has_next_page=page.has_next_page,
    )

    logger.debug(
        "Loaded user page",
        page_number=page_number,
        per_page=per_page,
        edges=len(edges),
        total_count=page.total_count,
        has_next_page=page.has_next_page,
    )

    return UserConnection(edges=edges, page_info=page_info, total_count=page.total_count)
