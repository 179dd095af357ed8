"""
Tests for page-number pagination helpers
"""

import pytest
import pytest_asyncio
from sqlalchemy import select

from graphql_app.dbmodels import Users
from graphql_app.graphql.errors import InvalidCursorError, InvalidPageSizeError
from graphql_app.graphql.pagination import (
    MAX_DB_INTEGER,
    Page,
    cursor_for_page,
    has_page_after,
    load_and_count,
    paginate,
    parse_cursor,
    validate_page_size,
)
from graphql_app.graphql.resolvers.connection import user_connections
from graphql_app.graphql.trail import QueryTrail


@pytest.mark.unit
class TestCursors:
    def test_missing_cursor_is_first_page(self):
        assert parse_cursor(None) == 1

    @pytest.mark.parametrize("cursor, page", [("1", 1), ("2", 2), ("42", 42), ("007", 7)])
    def test_parse_cursor(self, cursor, page):
        assert parse_cursor(cursor) == page

    @pytest.mark.parametrize(
        "cursor",
        [
            "",
            "two",
            "2.0",
            "0",
            "-1",
            "1_0",
            " 2 ",
            "+2",
            "\uff12",
            str(MAX_DB_INTEGER + 1),
            "9" * 5000,
        ],
    )
    def test_invalid_cursor(self, cursor):
        with pytest.raises(InvalidCursorError):
            parse_cursor(cursor)

    def test_cursor_round_trip(self):
        assert parse_cursor(cursor_for_page(7)) == 7

    def test_largest_page_number(self):
        assert parse_cursor(str(MAX_DB_INTEGER)) == MAX_DB_INTEGER

    @pytest.mark.parametrize("page_size", [0, -5])
    def test_invalid_page_size(self, page_size):
        with pytest.raises(InvalidPageSizeError):
            validate_page_size(page_size)

    @pytest.mark.parametrize(
        "total, per_page, pages", [(0, 3, 0), (3, 1, 3), (7, 3, 3), (6, 3, 2)]
    )
    def test_total_pages(self, total, per_page, pages):
        page = Page(
            items=[], page_number=1, per_page=per_page, total_count=total, has_next_page=False
        )
        assert page.total_pages == pages


@pytest_asyncio.fixture
async def five_users(db_session, user_factory):
    return [await user_factory(str(i)) for i in range(1, 6)]


@pytest.mark.requires_db
@pytest.mark.asyncio
class TestPaginate:
    base_query = select(Users).order_by(Users.id)

    async def test_load_and_count(self, db_session, five_users):
        items, total = await load_and_count(db_session, self.base_query, 2, 2)

        assert [user.name for user in items] == ["3", "4"]
        assert total == 5

    async def test_count_is_full_table_on_empty_page(self, db_session, five_users):
        items, total = await load_and_count(db_session, self.base_query, 9, 2)

        assert items == []
        assert total == 5

    @pytest.mark.parametrize("page_number, expected", [(1, True), (2, True), (3, False)])
    async def test_has_page_after(self, db_session, five_users, page_number, expected):
        assert await has_page_after(db_session, self.base_query, page_number, 2) is expected

    async def test_page_beyond_integer_range_is_empty(self, db_session, five_users):
        page = await paginate(db_session, self.base_query, 2**62, 5)

        assert page.items == []
        assert page.total_count == 5
        assert page.has_next_page is False

    async def test_paginate(self, db_session, five_users):
        page = await paginate(db_session, self.base_query, 3, 2)

        assert [user.name for user in page.items] == ["5"]
        assert page.total_count == 5
        assert page.has_next_page is False
        assert page.next_page_cursor == "4"

    async def test_every_edge_carries_next_page_cursor(self, db_session, five_users):
        connection = await user_connections(
            db_session, "2", 2, QueryTrail.from_paths("edges.node.name")
        )

        assert [edge.node.name for edge in connection.edges] == ["3", "4"]
        assert [edge.cursor for edge in connection.edges] == ["3", "3"]
        assert connection.page_info.start_cursor == "3"
        assert connection.page_info.end_cursor == "3"
        assert connection.page_info.has_next_page is True
        assert connection.total_count == 5

    async def test_nodes_are_shells_without_eager_loading(self, db_session, five_users):
        connection = await user_connections(
            db_session,
            None,
            5,
            QueryTrail.from_paths("edges.node.country.name"),
            eager_loading=False,
        )

        assert len(connection.edges) == 5
        assert not connection.edges[0].node.relations.is_loaded("country")
