from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select

from ...dbmodels import Users
from ...logging import get_logger
from ..context import get_context_from_info
from ..errors import NotFoundError, RelationNotLoadedError
from ..loaders import load_country
from ..nodes import country_from_db_model, user_nodes
from ..trail import QueryTrail

if TYPE_CHECKING:
    from ..types.country import Country
    from ..types.user import User

logger = get_logger(__name__)


async def resolve_users(info: strawberry.Info) -> list[User]:
    """Resolve every user, with relations the query selected loaded in batches."""
    ctx = get_context_from_info(info)

    async with ctx.database() as session:
        stmt = select(Users).order_by(Users.id)
        result = await session.execute(stmt)
        models = result.scalars().all()

        if not ctx.eager_loading:
            return user_nodes.from_db_models(models)

        return await user_nodes.load(models, session, QueryTrail.from_info(info))


async def resolve_user_country(user: User, info: strawberry.Info) -> Country:
    """
    Resolve the country of a user.

    Uses the country attached by the eager loader when there is one, and
    falls back to a point lookup when eager loading is disabled.
    """
    ctx = get_context_from_info(info)

    if user.relations.is_loaded("country"):
        country = user.relations.get("country")
    elif ctx.eager_loading:
        logger.error("Country relation read without being loaded", user_id=str(user.id))
        raise RelationNotLoadedError("country")
    else:
        async with ctx.database() as session:
            model = await load_country(session, user.country_id)
        country = country_from_db_model(model) if model is not None else None

    if country is None:
        raise NotFoundError("Country", user.country_id)
    return country
