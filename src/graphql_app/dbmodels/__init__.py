"""
Database models (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from sqlalchemy import ForeignKeyConstraint, Integer, MetaData, PrimaryKeyConstraint, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Countries(Base):
    __tablename__ = "countries"
    __table_args__ = (PrimaryKeyConstraint("id", name="countries_pkey"),)

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    users: Mapped[list["Users"]] = relationship(
        "Users", uselist=True, back_populates="country", lazy="raise"
    )


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        ForeignKeyConstraint(
            ["country_id"],
            ["countries.id"],
            name="users_country_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="users_pkey"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    country_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # Loaded explicitly by the GraphQL layer, never implicitly
    country: Mapped["Countries"] = relationship(
        "Countries", back_populates="users", lazy="raise"
    )


target_metadata = Base.metadata

__all__ = ["Base", "Countries", "Users", "target_metadata"]
