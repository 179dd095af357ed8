from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Countries
from ..logging import get_logger

logger = get_logger(__name__)


async def load_countries(session: AsyncSession, keys: Iterable[int]) -> dict[int, Countries]:
    """Batch load countries by ID in a single query."""
    unique_keys = sorted(set(keys))
    if not unique_keys:
        return {}

    stmt = select(Countries).where(Countries.id.in_(unique_keys))
    result = await session.execute(stmt)
    countries_map = {country.id: country for country in result.scalars().all()}
    logger.debug("Batch loaded countries", requested=len(unique_keys), found=len(countries_map))
    return countries_map


async def load_country(session: AsyncSession, country_id: int) -> Countries | None:
    """Load a single country by ID."""
    stmt = select(Countries).where(Countries.id == country_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()
