"""
Reusable seed data functions for database initialization.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Countries, Users
from ..logging import get_logger

logger = get_logger(__name__)

DEFAULT_COUNTRIES = ("Denmark", "Norway", "Sweden")


async def ensure_country(db: AsyncSession, name: str) -> Countries:
    """Return the country with this name, creating it if needed."""
    stmt = select(Countries).where(Countries.name == name)
    result = await db.execute(stmt)
    existing = result.scalars().first()
    if existing:
        logger.debug("Country already exists", country_id=existing.id, name=name)
        return existing

    country = Countries(name=name)
    db.add(country)
    await db.flush()
    logger.info("Created country", country_id=country.id, name=name)
    return country


async def seed_initial_data(
    db: AsyncSession,
    *,
    users_per_country: int = 3,
    countries: tuple[str, ...] = DEFAULT_COUNTRIES,
) -> int:
    """
    Seed countries and a handful of users in each.

    Users are named "<country> <n>" and only created when missing, so running
    the seed twice leaves the data unchanged.

    Returns:
        Number of users created
    """
    created = 0
    for country_name in countries:
        country = await ensure_country(db, country_name)
        for n in range(1, users_per_country + 1):
            name = f"{country_name} {n}"
            stmt = select(Users.id).where(Users.name == name, Users.country_id == country.id)
            if (await db.execute(stmt)).first() is not None:
                continue
            db.add(Users(name=name, country_id=country.id))
            created += 1

    await db.flush()
    logger.info("Seed data created", users_created=created, countries=len(countries))
    return created
