"""
Tree of fields requested by a GraphQL query below the current resolver.

Resolvers use it to decide which relations to load up front, e.g.
``QueryTrail.from_info(info).walk("edges", "node")`` tells the connection
resolver which fields of each user node the client asked for.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import strawberry
from strawberry.types.nodes import FragmentSpread, InlineFragment, SelectedField, Selection


def _is_skipped(directives: Mapping[str, Mapping[str, Any]] | None) -> bool:
    if not directives:
        return False
    if "skip" in directives and directives["skip"].get("if"):
        return True
    if "include" in directives and not directives["include"].get("if", True):
        return True
    return False


@dataclass(frozen=True)
class QueryTrail:
    """Requested GraphQL fields, keyed by field name (aliases are merged)."""

    children: Mapping[str, QueryTrail] = field(default_factory=dict)

    @classmethod
    def from_info(cls, info: strawberry.Info) -> QueryTrail:
        """Build the trail below the field currently being resolved."""
        selections: list[Selection] = []
        for selected in info.selected_fields:
            selections.extend(selected.selections)
        return cls.from_selections(selections)

    @classmethod
    def from_selections(cls, selections: Iterable[Selection]) -> QueryTrail:
        children: dict[str, list[Selection]] = {}
        for name, sub_selections in _flatten(selections):
            children.setdefault(name, []).extend(sub_selections)
        return cls({name: cls.from_selections(subs) for name, subs in children.items()})

    @classmethod
    def from_paths(cls, *paths: str) -> QueryTrail:
        """Build a trail from dotted paths such as ``"edges.node.country.name"``."""
        tree: dict[str, Any] = {}
        for path in paths:
            node = tree
            for part in path.split("."):
                node = node.setdefault(part, {})
        return cls._from_tree(tree)

    @classmethod
    def _from_tree(cls, tree: Mapping[str, Any]) -> QueryTrail:
        return cls({name: cls._from_tree(sub) for name, sub in tree.items()})

    def walk(self, *path: str) -> QueryTrail | None:
        """Follow ``path`` down the tree, or return None if it was not requested."""
        node: QueryTrail | None = self
        for name in path:
            if node is None:
                return None
            node = node.children.get(name)
        return node

    def __contains__(self, name: object) -> bool:
        return name in self.children

    def __iter__(self) -> Iterator[str]:
        return iter(self.children)


def _flatten(selections: Iterable[Selection]) -> Iterator[tuple[str, list[Selection]]]:
    for selection in selections:
        if _is_skipped(selection.directives):
            continue
        if isinstance(selection, SelectedField):
            yield selection.name, list(selection.selections)
        elif isinstance(selection, (FragmentSpread, InlineFragment)):
            yield from _flatten(selection.selections)
