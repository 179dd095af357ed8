"""
Unit tests for the eager loading engine
"""

import dataclasses

import pytest

from graphql_app.graphql.eager_loading import LoadedRelations, NodeLoader, Relation
from graphql_app.graphql.errors import RelationNotLoadedError
from graphql_app.graphql.trail import QueryTrail


@dataclasses.dataclass
class Node:
    key: int
    parent_key: int | None = None
    relations: LoadedRelations = dataclasses.field(default_factory=LoadedRelations)


class RecordingLoader:
    """Batch load function serving models from a dict and recording each call."""

    def __init__(self, rows: dict[int, dict]):
        self.rows = rows
        self.calls: list[set[int]] = []

    async def __call__(self, session, keys):
        keys = set(keys)
        self.calls.append(keys)
        return {key: self.rows[key] for key in keys if key in self.rows}


def build_loaders(parent_rows, grandparent_rows):
    grandparent_load = RecordingLoader(grandparent_rows)
    parent_load = RecordingLoader(parent_rows)

    grandparents = NodeLoader(from_db_model=lambda row: Node(key=row["key"]))
    parents = NodeLoader(
        from_db_model=lambda row: Node(key=row["key"], parent_key=row["parent"]),
        relations=(
            Relation(
                name="parent",
                foreign_key=lambda node: node.parent_key,
                load=grandparent_load,
                child=grandparents,
            ),
        ),
    )
    children = NodeLoader(
        from_db_model=lambda row: Node(key=row["key"], parent_key=row["parent"]),
        relations=(
            Relation(
                name="parent",
                foreign_key=lambda node: node.parent_key,
                load=parent_load,
                child=parents,
            ),
        ),
    )
    return children, parent_load, grandparent_load


CHILD_ROWS = [
    {"key": 1, "parent": 10},
    {"key": 2, "parent": 20},
    {"key": 3, "parent": 10},
]
PARENT_ROWS = {10: {"key": 10, "parent": 100}, 20: {"key": 20, "parent": 100}}
GRANDPARENT_ROWS = {100: {"key": 100}}


@pytest.mark.unit
class TestLoadedRelations:
    def test_unloaded_relation_raises(self):
        relations = LoadedRelations()

        with pytest.raises(RelationNotLoadedError, match="relation 'country' was not loaded"):
            relations.get("country")

    def test_attached_none_counts_as_loaded(self):
        relations = LoadedRelations()
        relations.attach("country", None)

        assert relations.is_loaded("country")
        assert relations.get("country") is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestNodeLoader:
    async def test_unselected_relation_is_not_loaded(self):
        children, parent_load, _ = build_loaders(PARENT_ROWS, GRANDPARENT_ROWS)

        nodes = await children.load(CHILD_ROWS, None, QueryTrail.from_paths("key"))

        assert [node.key for node in nodes] == [1, 2, 3]
        assert parent_load.calls == []
        assert not nodes[0].relations.is_loaded("parent")

    async def test_one_batch_per_relation(self):
        children, parent_load, grandparent_load = build_loaders(PARENT_ROWS, GRANDPARENT_ROWS)

        nodes = await children.load(CHILD_ROWS, None, QueryTrail.from_paths("parent.key"))

        assert parent_load.calls == [{10, 20}]
        assert grandparent_load.calls == []
        assert [node.relations.get("parent").key for node in nodes] == [10, 20, 10]

    async def test_nested_relations_follow_the_trail(self):
        children, parent_load, grandparent_load = build_loaders(PARENT_ROWS, GRANDPARENT_ROWS)

        nodes = await children.load(CHILD_ROWS, None, QueryTrail.from_paths("parent.parent.key"))

        assert parent_load.calls == [{10, 20}]
        assert grandparent_load.calls == [{100}]
        grandparent = nodes[1].relations.get("parent").relations.get("parent")
        assert grandparent.key == 100

    async def test_missing_child_is_attached_as_none(self):
        children, _, _ = build_loaders({10: PARENT_ROWS[10]}, GRANDPARENT_ROWS)

        nodes = await children.load(CHILD_ROWS, None, QueryTrail.from_paths("parent.key"))

        assert nodes[0].relations.get("parent").key == 10
        assert nodes[1].relations.get("parent") is None

    async def test_empty_batch_issues_no_queries(self):
        children, parent_load, _ = build_loaders(PARENT_ROWS, GRANDPARENT_ROWS)

        nodes = await children.load([], None, QueryTrail.from_paths("parent.key"))

        assert nodes == []
        assert parent_load.calls == []
