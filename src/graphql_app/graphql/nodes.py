"""
Node loaders mapping database models to GraphQL types
"""

import strawberry

from ..dbmodels import Countries, Users
from .eager_loading import NodeLoader, Relation
from .loaders import load_countries
from .types.country import Country
from .types.user import User


def country_from_db_model(country: Countries) -> Country:
    return Country(id=strawberry.ID(str(country.id)), name=country.name)


def user_from_db_model(user: Users) -> User:
    return User(id=strawberry.ID(str(user.id)), name=user.name, country_id=user.country_id)


country_nodes: NodeLoader[Countries, Country] = NodeLoader(from_db_model=country_from_db_model)

user_nodes: NodeLoader[Users, User] = NodeLoader(
    from_db_model=user_from_db_model,
    relations=(
        Relation(
            name="country",
            foreign_key=lambda user: user.country_id,
            load=load_countries,
            child=country_nodes,
        ),
    ),
)
