"""
Eager loading of related entities for GraphQL nodes.

Loading happens in two steps. ``NodeLoader.from_db_models`` turns ORM rows
into GraphQL node shells, then ``NodeLoader.eager_load_all_children`` visits
each declared relation, and for every relation present in the query trail
issues one query for the whole batch and attaches the children to their
parents by key. Relations the query did not select stay unpopulated.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Hashable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from ..logging import get_logger
from .errors import RelationNotLoadedError
from .trail import QueryTrail

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")
NodeT = TypeVar("NodeT")


class LoadedRelations:
    """Children attached to one node by the eager loader."""

    def __init__(self) -> None:
        self._children: dict[str, Any] = {}

    def attach(self, name: str, child: Any) -> None:
        self._children[name] = child

    def is_loaded(self, name: str) -> bool:
        return name in self._children

    def get(self, name: str) -> Any:
        try:
            return self._children[name]
        except KeyError:
            raise RelationNotLoadedError(name) from None

    def __repr__(self) -> str:
        return f"LoadedRelations({sorted(self._children)})"


@dataclass(frozen=True)
class Relation:
    """A to-one relation from a parent node to a child node.

    Attributes:
        name: GraphQL field name of the relation on the parent type
        foreign_key: Reads the child key off a parent node
        load: Batch loader returning ``{key: model}`` for a set of keys
        child: Node loader used to build (and further eager load) the children
    """

    name: str
    foreign_key: Callable[[Any], Hashable]
    load: Callable[[AsyncSession, Iterable[Any]], Awaitable[Mapping[Any, Any]]]
    child: NodeLoader[Any, Any]


@dataclass(frozen=True)
class NodeLoader(Generic[ModelT, NodeT]):
    """Maps ORM models of one type to GraphQL nodes and loads their relations."""

    from_db_model: Callable[[ModelT], NodeT]
    relations: Sequence[Relation] = field(default_factory=tuple)

    def from_db_models(self, models: Iterable[ModelT]) -> list[NodeT]:
        return [self.from_db_model(model) for model in models]

    async def eager_load_all_children(
        self, nodes: Sequence[NodeT], session: AsyncSession, trail: QueryTrail
    ) -> None:
        if not nodes:
            return

        for relation in self.relations:
            child_trail = trail.walk(relation.name)
            if child_trail is None:
                continue

            keys = {relation.foreign_key(node) for node in nodes}
            models = await relation.load(session, keys)
            children = {key: relation.child.from_db_model(model) for key, model in models.items()}
            await relation.child.eager_load_all_children(
                list(children.values()), session, child_trail
            )

            for node in nodes:
                # A missing child is attached as None so resolvers can report it
                node.relations.attach(relation.name, children.get(relation.foreign_key(node)))

            logger.debug(
                "Eager loaded relation",
                relation=relation.name,
                parents=len(nodes),
                keys=len(keys),
                loaded=len(children),
            )

    async def load(
        self, models: Iterable[ModelT], session: AsyncSession, trail: QueryTrail
    ) -> list[NodeT]:
        """Build nodes for ``models`` and eager load every relation in ``trail``."""
        nodes = self.from_db_models(models)
        await self.eager_load_all_children(nodes, session, trail)
        return nodes
